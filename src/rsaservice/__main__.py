"""Command line front end for the key pair service.

Subcommands:

    demo      generate a key pair, then encrypt/decrypt and sign/verify the sample inputs
    keygen    generate a key pair and store it as PEM files
    encrypt   encrypt a message with a stored public key (prints base64)
    decrypt   decrypt a base64 ciphertext with a stored private key
    sign      sign JSON data with a stored private key (prints a JSON signature packet)
    verify    verify JSON data against a base64 signature (exit status 1 on failure)

The passphrase comes from --passphrase or RSASERVICE_PASSPHRASE, and is prompted for on a terminal otherwise.

Typical usage example:

    rsaservice keygen --keys ./keys --keysize 3072
    python -m rsaservice sign --keys ./keys --data '{"user": "alice", "amount": 42}'
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import argparse
import base64
import getpass
import json
import logging
import os
import pathlib
import sys

import rsaservice
from rsaservice import storage
from rsaservice.config import SAMPLE_DATA
from rsaservice.config import SAMPLE_MESSAGE
from rsaservice.config import ServiceConfig
from rsaservice.errors import CryptoServiceError
from rsaservice.service import KeyPairCryptoService

logger = logging.getLogger("rsaservice")

keydir = argparse.ArgumentParser(add_help=False)
keydir.add_argument("--keys", "-k", type=pathlib.Path, required=True, help="Directory holding public.pem/private.pem.")
keysize = argparse.ArgumentParser(add_help=False)
keysize.add_argument("--keysize", type=int, choices=[2048, 3072, 4096], help="Key size (in bits).")
payloads = argparse.ArgumentParser(add_help=False)
payloads.add_argument("--data",
                      "-d",
                      required=True,
                      help="JSON data or path to a file containing it. If Path start with `P:`")
corep = argparse.ArgumentParser(prog="rsaservice")
corep.add_argument("--version", "-v", action="version", version=f"%(prog)s {rsaservice.__version__}")
corep.add_argument("--passphrase", help="Private key passphrase. Prefer RSASERVICE_PASSPHRASE.")
corep.add_argument("--non-interactive", "-n", action="store_true", help="Never prompt for the passphrase.")
corep.add_argument("--verbose", action="store_true", help="Log progress to stderr.")
commands = corep.add_subparsers(dest="subcommand", title="Subcommands", required=True)

commands.add_parser("demo", parents=[keysize], help="Walk through all four operations on sample data.")
keygen = commands.add_parser("keygen", parents=[keydir, keysize], help="Key generation utility.")
keygen.add_argument("--overwrite", "-o", action="store_true", help="Overwrite existing key files.")
encrypt = commands.add_parser("encrypt", parents=[keydir], help="Encryption utility.")
encrypt.add_argument("--message",
                     "-m",
                     required=True,
                     help="Message or path to file containing payload. If Path start with `P:`")
decrypt = commands.add_parser("decrypt", parents=[keydir], help="Decryption utility.")
decrypt.add_argument("--ciphertext", "-c", required=True, help="Base64 ciphertext.")
commands.add_parser("sign", parents=[keydir, payloads], help="Signing utility.")
verify = commands.add_parser("verify", parents=[keydir, payloads], help="Signature verification utility.")
verify.add_argument("--signature", "-S", required=True, help="Base64 signature.")
verify.add_argument("--algorithm", default="sha256", help="Digest algorithm named in the signature packet.")


def check_message(mess: str) -> str:
    """Parse message for path-notice."""
    if mess.startswith("P:"):
        with open(mess[2:], "r", encoding="utf-8") as f:
            mess = f.read()
    return mess


def resolve_passphrase(args: argparse.Namespace) -> str | None:
    """Explicit flag first; otherwise leave it to the environment, prompting only on a terminal."""
    if args.passphrase:
        return args.passphrase
    if args.non_interactive or not sys.stdin.isatty():
        return None
    if os.environ.get("RSASERVICE_PASSPHRASE"):
        return None
    return getpass.getpass("Private key passphrase: ")


def run(args: argparse.Namespace) -> int:
    config = ServiceConfig.from_env(passphrase=resolve_passphrase(args), key_size=getattr(args, "keysize", None))
    service = KeyPairCryptoService(config)
    if args.subcommand not in ("demo", "keygen"):
        service.load_key_pair(storage.load_key_pair(args.keys))

    match args.subcommand:
        case "demo":
            service.generate_key_pair()
            encrypted = service.encrypt_with_public_key(SAMPLE_MESSAGE)
            if encrypted is not None:
                decrypted = service.decrypt_with_private_key(encrypted)
                if decrypted is not None:
                    print("Decrypted Message: ", decrypted)
            packet = service.sign_with_private_key(SAMPLE_DATA)
            if packet is not None:
                if service.verify_signature_with_public_key(packet.algorithm, SAMPLE_DATA, packet.signed_hash):
                    print("The signature and data both are verified")
                else:
                    print("Either data is not correct or signature is wrong")
        case "keygen":
            if not args.overwrite and any(path.exists() for path in storage.key_paths(args.keys)):
                print("Destination private or public key already exists!")
                return 1
            storage.save_key_pair(service.generate_key_pair(), args.keys, overwrite=args.overwrite)
            print(f"Key pair generated in {args.keys}")
        case "encrypt":
            ciphertext = service.encrypt_with_public_key(check_message(args.message))
            print(base64.b64encode(ciphertext).decode("ascii"))
        case "decrypt":
            print(service.decrypt_with_private_key(base64.b64decode(args.ciphertext, validate=True)))
        case "sign":
            packet = service.sign_with_private_key(json.loads(check_message(args.data)))
            print(
                json.dumps({
                    "algorithm": packet.algorithm.value,
                    "signedHash": base64.b64encode(packet.signed_hash).decode("ascii"),
                }))
        case "verify":
            data = json.loads(check_message(args.data))
            signature = base64.b64decode(args.signature, validate=True)
            if not service.verify_signature_with_public_key(args.algorithm, data, signature):
                print("Either data is not correct or signature is wrong")
                return 1
            print("The signature and data both are verified")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, run the subcommand and map failures to exit status 2."""
    args = corep.parse_args(argv)
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        return run(args)
    except (CryptoServiceError, OSError, ValueError) as exc:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
