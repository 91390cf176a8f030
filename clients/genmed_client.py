import requests
from typing import Dict, Any

class GenericFinderClient:
    def __init__(self, base_url: str):
        self.base_url = base_url.rstrip("/")
        self.headers = {"Content-Type": "application/json"}

    def search(self, query: str, timeout: int = 120) -> Dict[str, Any]:
        r = requests.post(f"{self.base_url}/search", json={"query": query}, headers=self.headers, timeout=timeout)
        if r.status_code == 400:
            return r.json()
        r.raise_for_status(); return r.json()

    def health(self, timeout: int = 10) -> Dict[str, Any]:
        r = requests.get(f"{self.base_url}/health", timeout=timeout)
        r.raise_for_status(); return r.json()
