# --- Standard library imports ---
import os
import sys
import logging
import argparse

# --- Project imports ---
# Only modules free of third-party imports here; the rest are loaded in
# main() once run_sanity_checks() has confirmed they can be.
from .sanity import run_sanity_checks
from .logger import get_logger, setup_logging


EXIT_OK = 0
EXIT_FAILURE = 1

DEFAULT_TTL = 1   # Cloudflare 'automatic'


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cf-ddns",
        description="Keep Cloudflare A/AAAA records in sync with this host's public IP.",
    )
    parser.add_argument(
        "-c", "--config",
        help="Domain config file (default: $CF_DDNS_CONFIG or ~/.config/cf_ddns/config.json)",
    )
    parser.add_argument(
        "-d", "--domain",
        help="Only sync this configured domain",
    )

    family = parser.add_mutually_exclusive_group()
    family.add_argument("-4", "--ipv4-only", action="store_true", help="Only update A records")
    family.add_argument("-6", "--ipv6-only", action="store_true", help="Only update AAAA records")

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Debug output")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Warnings and errors only")

    add = parser.add_argument_group("adding a domain")
    add.add_argument(
        "-a", "--add-domain", metavar="DOMAIN",
        help="Append DOMAIN to the config file and exit",
    )
    add.add_argument(
        "--token", default="",
        help="Cloudflare API token (falls back to CLOUDFLARE_API_TOKEN at run time)",
    )
    add.add_argument(
        "--zone-id", default="",
        help="Cloudflare zone ID (falls back to CLOUDFLARE_ZONE_ID at run time)",
    )
    add.add_argument("--proxied", action="store_true", help="Proxy traffic through Cloudflare")
    add.add_argument(
        "--ttl", type=int, default=DEFAULT_TTL,
        help="Record TTL in seconds, 1 = automatic (default: 1)",
    )
    return parser

def _log_level(args: argparse.Namespace, default: str) -> int:
    if args.verbose:
        return logging.DEBUG
    if args.quiet:
        return logging.WARNING
    return getattr(logging, default.upper(), logging.INFO)

def _versions(args: argparse.Namespace) -> tuple[str, ...]:
    if args.ipv4_only:
        return ("ipv4",)
    if args.ipv6_only:
        return ("ipv6",)
    return ("ipv4", "ipv6")

def run_add_domain(args: argparse.Namespace) -> int:
    from .domains import DomainConfig, add_domain

    logger = get_logger("main")
    entry = DomainConfig(
        domain=args.add_domain,
        api_token=args.token,
        zone_id=args.zone_id,
        proxied=args.proxied,
        ttl=args.ttl,
    )

    try:
        added = add_domain(args.config, entry)
    except (OSError, ValueError) as e:
        logger.error(f"Cannot add {entry.domain}: {e}")
        return EXIT_FAILURE

    if not added:
        logger.error(f"Domain {entry.domain} already exists in {args.config}")
        return EXIT_FAILURE

    if not entry.api_token or not entry.zone_id:
        logger.info("Missing token/zone id will be read from the environment at run time")
    return EXIT_OK

def run_sync(args: argparse.Namespace) -> int:
    from .domains import load_domains
    from .ddns_controller import DDNSController

    logger = get_logger("main")

    try:
        domains = load_domains(args.config)
    except (FileNotFoundError, ValueError) as e:
        logger.critical(str(e))
        return EXIT_FAILURE

    if args.domain:
        domains = [d for d in domains if d.domain == args.domain]
        if not domains:
            logger.critical(f"Domain {args.domain} is not in {args.config}")
            return EXIT_FAILURE

    if not domains:
        logger.warning(f"No domains configured in {args.config}")
        return EXIT_OK

    controller = DDNSController()
    if not controller.run(domains, _versions(args)):
        logger.error("One or more DNS updates failed; cache left for retry on next run")
        return EXIT_FAILURE
    return EXIT_OK

def main(argv=None) -> int:
    """
    Entry point: one synchronization pass (or one config edit) per invocation.
    """
    args = build_parser().parse_args(argv)

    # Console only until the dependencies (and file locking) are confirmed
    setup_logging(level=_log_level(args, os.getenv("LOG_LEVEL", "INFO")))
    if not run_sanity_checks():
        return EXIT_FAILURE

    from .config import Config

    setup_logging(
        level=_log_level(args, Config.LOG_LEVEL),
        log_file=Config.LOG_FILE,
        max_lines=Config.LOG_MAX_LINES,
    )
    logger = get_logger("main")
    logger.debug(f"Python version: {sys.version}")

    if args.config is None:
        args.config = Config.CONFIG_FILE

    if args.add_domain:
        return run_add_domain(args)

    logger.info("🚀 Starting Cloudflare DNS sync")
    return run_sync(args)

if __name__ == "__main__":
    sys.exit(main())
