# --- Standard library imports ---
import json

# --- Third-party imports ---
import requests

# --- Project imports ---
from .config import Config
from .logger import get_logger
from .domains import DomainConfig


class CloudflareClient:
    """
    Handles all communication with the Cloudflare DNS API for one domain.
    """

    def __init__(self, domain: DomainConfig, api_base_url: str | None = None):
        """
        Args:
            domain: Domain entry with resolved token and zone id
            api_base_url: Override for Config.API_BASE_URL
        """
        self.logger = get_logger("cloudflare")

        # Configuration
        self.api_base_url = (api_base_url or Config.API_BASE_URL).rstrip("/")
        self.zone_id = domain.zone_id
        self.dns_name = domain.domain

        #ttl: Time To Live (TTL) of the DNS record in seconds. Setting to 1 means 'automatic'.
        #Value must be between 60 and 86400, with the minimum reduced to 30 for Enterprise zones.
        self.ttl = domain.ttl
        self.proxied = domain.proxied   # Orange cloud when True

        self.headers = {
            "Authorization": f"Bearer {domain.api_token}",
            "Content-Type": "application/json",
        }

    # Private helper for URL construction
    def _build_resource_url(
        self,
        record_type: str = "A",
        is_collection: bool = True,
        record_id: str = None
    ) -> str:
        """
        Constructs the appropriate Cloudflare DNS resource URL based on the operation type

        Args:
            record_type: "A" or "AAAA", used as a filter on the collection endpoint
            is_collection: True for the List/Collection endpoint (GET)
                           False for the Single Resource endpoint (PUT)
            record_id: The unique ID of the target record (required if is_collection is False)

        Returns:
            The complete, correctly formatted API endpoint URL
        """
        base_path = (
            f"{self.api_base_url}/zones/"
            f"{self.zone_id}/dns_records"
        )

        if is_collection:
            filters = (
                f"?name={self.dns_name}"
                f"&type={record_type}"
            )
            return base_path + filters

        if not record_id:
            raise ValueError("record_id must be provided for single resource operations")

        return base_path + f"/{record_id}"

    def get_record_id(self, record_type: str) -> str:
        """
        Look up the ID of the existing DNS record for this domain and type.

        Raises:
            RuntimeError: If the request fails, Cloudflare reports an error,
                          or no matching record exists
        """
        list_url = self._build_resource_url(record_type, is_collection=True)
        self.logger.debug(f"Initiating record lookup → {list_url}")

        try:
            resp = requests.get(list_url, headers=self.headers, timeout=Config.API_TIMEOUT)
            resp.raise_for_status()
            data = resp.json()
        except requests.RequestException as e:
            raise RuntimeError(f"API GET request failed for {self.dns_name}: {e}") from e
        except ValueError as e:
            raise RuntimeError(f"GET for {self.dns_name} returned invalid JSON") from e

        self.logger.debug(f"Live JSON received:\n{json.dumps(data, indent=2)}")

        if not data.get("success", False):
            raise RuntimeError(f"Cloudflare GET error for {self.dns_name}: {data.get('errors')}")

        records_list = data.get("result") or []
        if not records_list:
            raise RuntimeError(f"No DNS record found for {self.dns_name} ({record_type})")

        return records_list[0]["id"]

    def update_record(self, record_id: str, record_type: str, new_ip: str) -> dict:
        """
        Update the DNS record to point to the provided IP address.

        Returns:
            dict: Updated DNS record from Cloudflare response

        Raises:
            RuntimeError: If the API request fails or response is invalid
        """
        url = self._build_resource_url(record_type, is_collection=False, record_id=record_id)

        payload = {
            "type": record_type,
            "name": self.dns_name,
            "content": new_ip,
            "ttl": self.ttl,
            "proxied": self.proxied,
        }

        try:
            resp = requests.put(
                url, headers=self.headers, json=payload, timeout=Config.API_TIMEOUT
            )
            resp.raise_for_status()
        except requests.RequestException as e:
            raise RuntimeError(
                f"Cloudflare PUT failed for DNS record "
                f"[{record_id}] → {new_ip}"
                ) from e

        try:
            put_resp_data = resp.json()
        except ValueError as e:
            raise RuntimeError(
                "PUT succeeded but response was not valid JSON"
            ) from e

        self.logger.debug(
            "PUT JSON response:\n%s",
            json.dumps(put_resp_data, indent=2),
        )

        if not put_resp_data.get("success", False):
            raise RuntimeError(
                f"Cloudflare PUT error for {self.dns_name}: {put_resp_data.get('errors')}"
            )

        new_dns_record = put_resp_data.get("result")
        if not new_dns_record:
            raise RuntimeError(
                "PUT succeeded but response contained no DNS record"
            )

        return new_dns_record
