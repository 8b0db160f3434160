# --- Standard library imports ---
import os
import json
import tempfile
from pathlib import Path
from dataclasses import dataclass

# --- Project imports ---
from .config import Config
from .logger import get_logger


logger = get_logger("domains")

@dataclass
class DomainConfig:
    """
    One managed domain and the Cloudflare settings used to update it.

    On disk the token and zone id are stored as `cf_token` and `zoneid`.
    Either may be empty, in which case the environment supplies it at
    run time (see `resolve_credentials`).
    """
    domain: str
    api_token: str = ""
    zone_id: str = ""
    proxied: bool = False
    ttl: int = Config.CLOUDFLARE_AUTO_TTL

    @classmethod
    def from_dict(cls, data: dict) -> "DomainConfig":
        if not isinstance(data, dict) or not data.get("domain"):
            raise ValueError(f"Domain entry without a 'domain' name: {data!r}")

        try:
            ttl = int(data.get("ttl", Config.CLOUDFLARE_AUTO_TTL))
        except (TypeError, ValueError):
            raise ValueError(f"Invalid ttl for {data['domain']}: {data.get('ttl')!r}") from None

        # JSON booleans only; "false" as a string must not enable the proxy
        proxied = data.get("proxied", False)
        if not isinstance(proxied, bool):
            raise ValueError(f"Invalid proxied flag for {data['domain']}: {proxied!r} (use true or false)")

        return cls(
            domain=data["domain"],
            api_token=data.get("cf_token") or "",
            zone_id=data.get("zoneid") or "",
            proxied=proxied,
            ttl=ttl,
        )

    def to_dict(self) -> dict:
        return {
            "domain": self.domain,
            "cf_token": self.api_token,
            "zoneid": self.zone_id,
            "proxied": self.proxied,
            "ttl": self.ttl,
        }

    def resolve_credentials(self) -> "DomainConfig":
        """
        Return a copy with missing token/zone id filled from the environment.

        Raises:
            ValueError: If a credential is absent from both the entry and the environment
        """
        api_token = self.api_token or os.getenv("CLOUDFLARE_API_TOKEN", "")
        zone_id = self.zone_id or os.getenv("CLOUDFLARE_ZONE_ID", "")

        missing = [
            name for name, value in (("api token", api_token), ("zone id", zone_id))
            if not value
        ]
        if missing:
            raise ValueError(f"No {' or '.join(missing)} configured for {self.domain}")

        return DomainConfig(
            domain=self.domain,
            api_token=api_token,
            zone_id=zone_id,
            proxied=self.proxied,
            ttl=self.ttl,
        )

def validate_ttl(ttl: int) -> None:
    """
    Cloudflare TTL: 1 means 'automatic', otherwise 60..86400 seconds.
    """
    if ttl == Config.CLOUDFLARE_AUTO_TTL:
        return
    if not Config.CLOUDFLARE_MIN_TTL <= ttl <= Config.CLOUDFLARE_MAX_TTL:
        raise ValueError(
            f"TTL must be {Config.CLOUDFLARE_AUTO_TTL} (auto) or between "
            f"{Config.CLOUDFLARE_MIN_TTL} and {Config.CLOUDFLARE_MAX_TTL}, got {ttl}"
        )

def _read_document(path: Path) -> dict:
    try:
        document = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise ValueError(f"Config file {path} is not valid JSON: {e}") from e

    if not isinstance(document, dict) or not isinstance(document.get("domains"), list):
        raise ValueError(f"Config file {path} has no 'domains' list")

    return document

def _write_private(path: Path, document: dict) -> None:
    """
    Replace `path` atomically with `document`, readable by the owner only.

    The JSON is written to a 0600 temp file beside the target and renamed
    over it, so a failed write never leaves a truncated config behind.
    """
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w") as fh:
            json.dump(document, fh, indent=2)
            fh.write("\n")
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise

def load_domains(path) -> list[DomainConfig]:
    """
    Load the ordered list of domain entries from the JSON config file.

    Raises:
        FileNotFoundError: If the config file does not exist
        ValueError: If the file is malformed
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {path}")

    document = _read_document(path)
    domains = [DomainConfig.from_dict(entry) for entry in document["domains"]]
    logger.debug(f"Loaded {len(domains)} domain(s) from {path}")
    return domains

def add_domain(path, entry: DomainConfig) -> bool:
    """
    Append a domain entry to the config file, creating the file if needed.

    The file holds API tokens, so it is kept at mode 0600 inside a 0700
    directory.

    Returns:
        True if the entry was added, False if the domain already exists
        (the file is left untouched).

    Raises:
        ValueError: If the existing file is malformed or the TTL is invalid
    """
    path = Path(path)
    validate_ttl(entry.ttl)

    if path.exists():
        document = _read_document(path)
    else:
        document = {"domains": []}

    existing = {item.get("domain") for item in document["domains"] if isinstance(item, dict)}
    if entry.domain in existing:
        logger.warning(f"Domain {entry.domain} already present in {path}; not added")
        return False

    document["domains"].append(entry.to_dict())

    path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
    os.chmod(path.parent, 0o700)
    _write_private(path, document)

    logger.info(f"➕ Added {entry.domain} to {path}")
    return True
