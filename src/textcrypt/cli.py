"""
textcrypt CLI

Commands:
  text sign           - Sign a file (or stdin) with a Blake3 or Ed25519 key
  text verify         - Verify a signature
  text generate       - Generate a Blake3 key or Ed25519 key pair
  text generate-aead  - Generate a ChaCha20-Poly1305 key
  text encrypt        - Encrypt a file (or stdin)
  text decrypt        - Decrypt base64 ciphertext
  genpwd              - Generate a random password
"""

import argparse
import base64
import logging
import os
import sys
import structlog

from .config import Settings
from .errors import TextCryptError
from .keys import bytes_reader, open_input, read_content, write_key_bundle
from .passwords import generate_password
from .process import (
    process_text_decrypt,
    process_text_encrypt,
    process_text_encrypt_key_generate,
    process_text_key_generate,
    process_text_sign,
    process_text_verify,
)
from .signer import TextSignFormat

logger = structlog.get_logger()


def configure_logging(level: str) -> None:
    """Send structlog output to stderr so stdout only carries results."""
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper(), logging.WARNING)
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def b64_encode(data: bytes) -> str:
    """URL-safe base64 without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def b64_decode(text: str) -> bytes:
    text = "".join(text.split())
    return base64.urlsafe_b64decode(text + "=" * (-len(text) % 4))


def verify_file(filename: str) -> str:
    if filename == "-" or os.path.isfile(filename):
        return filename
    raise argparse.ArgumentTypeError(f"File does not exist: {filename}")


def verify_path(path: str) -> str:
    if os.path.isdir(path):
        return path
    raise argparse.ArgumentTypeError(f"Path does not exist: {path}")


def parse_format(value: str) -> TextSignFormat:
    try:
        return TextSignFormat.parse(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def cmd_sign(args):
    """Sign input and print the base64 signature."""
    key = read_content(args.key)
    with open_input(args.input) as reader:
        signature = process_text_sign(reader, key, args.format)
    print(b64_encode(signature))


def cmd_verify(args):
    """Verify a base64 signature against input."""
    key = read_content(args.key)
    try:
        signature = b64_decode(args.sig)
    except ValueError as e:
        print(f"Error: invalid signature encoding: {e}")
        sys.exit(1)

    with open_input(args.input) as reader:
        verified = process_text_verify(reader, key, signature, args.format)

    if verified:
        print("Signature verified")
    else:
        print("Signature not verified")
        sys.exit(1)


def cmd_generate(args):
    """Generate signing key material into a directory."""
    bundle = process_text_key_generate(args.format)
    for path in write_key_bundle(bundle, args.output_path):
        print(f"Wrote {path}")


def cmd_generate_aead(args):
    """Generate an encryption key into a directory."""
    bundle = process_text_encrypt_key_generate()
    for path in write_key_bundle(bundle, args.output_path):
        print(f"Wrote {path}")


def cmd_encrypt(args):
    """Encrypt input and print base64 ciphertext."""
    key = read_content(args.key)
    with open_input(args.input) as reader:
        ciphertext = process_text_encrypt(reader, key)
    print(b64_encode(ciphertext))


def cmd_decrypt(args):
    """Decrypt base64 ciphertext and print the plaintext."""
    key = read_content(args.key)
    try:
        ciphertext = b64_decode(read_content(args.input).decode("ascii"))
    except ValueError as e:
        print(f"Error: invalid ciphertext encoding: {e}")
        sys.exit(1)

    plaintext = process_text_decrypt(bytes_reader(ciphertext), key)
    print(plaintext.decode("utf-8", errors="replace"))


def cmd_genpwd(args):
    """Print a random password."""
    try:
        password = generate_password(
            length=args.length,
            upper=not args.no_upper_case,
            lower=not args.no_lower_case,
            number=not args.no_numbers,
            symbol=not args.no_symbols,
        )
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)
    print(password)


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="textcrypt",
        description="textcrypt - Text signing, verification and encryption",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    try:
        default_format = parse_format(settings.default_format)
    except argparse.ArgumentTypeError as e:
        parser.error(f"TEXTCRYPT_DEFAULT_FORMAT: {e}")

    # text
    text_parser = subparsers.add_parser("text", help="Sign, verify, encrypt or decrypt text")
    text_subparsers = text_parser.add_subparsers(dest="text_command", help="Text commands")

    sign_parser = text_subparsers.add_parser("sign", help="Sign a text")
    sign_parser.add_argument("-i", "--input", type=verify_file, default="-")
    sign_parser.add_argument("-k", "--key", type=verify_file, required=True)
    sign_parser.add_argument("--format", type=parse_format, default=default_format)
    sign_parser.set_defaults(func=cmd_sign)

    verify_parser = text_subparsers.add_parser("verify", help="Verify a signature")
    verify_parser.add_argument("-i", "--input", type=verify_file, default="-")
    verify_parser.add_argument("-k", "--key", type=verify_file, required=True)
    verify_parser.add_argument("--sig", required=True, help="Base64 signature")
    verify_parser.add_argument("--format", type=parse_format, default=default_format)
    verify_parser.set_defaults(func=cmd_verify)

    generate_parser = text_subparsers.add_parser(
        "generate", help="Generate a Blake3 key or Ed25519 key pair"
    )
    generate_parser.add_argument("--format", type=parse_format, default=default_format)
    generate_parser.add_argument("-o", "--output-path", type=verify_path, required=True)
    generate_parser.set_defaults(func=cmd_generate)

    aead_parser = text_subparsers.add_parser(
        "generate-aead", help="Generate a ChaCha20-Poly1305 key"
    )
    aead_parser.add_argument("-o", "--output-path", type=verify_path, required=True)
    aead_parser.set_defaults(func=cmd_generate_aead)

    encrypt_parser = text_subparsers.add_parser("encrypt", help="Encrypt text")
    encrypt_parser.add_argument("-i", "--input", type=verify_file, default="-")
    encrypt_parser.add_argument("-k", "--key", type=verify_file, required=True)
    encrypt_parser.set_defaults(func=cmd_encrypt)

    decrypt_parser = text_subparsers.add_parser("decrypt", help="Decrypt content")
    decrypt_parser.add_argument("-i", "--input", type=verify_file, default="-")
    decrypt_parser.add_argument("-k", "--key", type=verify_file, required=True)
    decrypt_parser.set_defaults(func=cmd_decrypt)

    # genpwd
    genpwd_parser = subparsers.add_parser("genpwd", help="Generate a random password")
    genpwd_parser.add_argument("-l", "--length", type=int, default=settings.password_length)
    genpwd_parser.add_argument("--no-upper-case", action="store_true")
    genpwd_parser.add_argument("--no-lower-case", action="store_true")
    genpwd_parser.add_argument("--no-numbers", action="store_true")
    genpwd_parser.add_argument("--no-symbols", action="store_true")
    genpwd_parser.set_defaults(func=cmd_genpwd)

    return parser


def main(argv=None):
    settings = Settings.from_env()
    configure_logging(settings.log_level)

    parser = build_parser(settings)
    args = parser.parse_args(argv)

    func = getattr(args, "func", None)
    if func is None:
        parser.print_help()
        return

    try:
        func(args)
    except TextCryptError as e:
        logger.error("command_failed", command=args.command, error=str(e))
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
