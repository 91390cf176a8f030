# genmed/infra/rxnav/rxnav_adapter.py
from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from genmed.domain.errors import UpstreamMalformedError, UpstreamTransportError
from genmed.domain.models import ConceptGroup, VocabularyConcept
from genmed.domain.ports import VocabularyPort

logger = logging.getLogger("genmed.rxnav")

BASE = "https://rxnav.nlm.nih.gov/REST"
UA = "GenericMedFinder/0.1 (+https://rxnav.nlm.nih.gov)"


def _parse_groups(container: Any) -> Optional[List[ConceptGroup]]:
    """
    RxNav wraps concept groups as {"drugGroup"|"allRelatedGroup": {"conceptGroup": [...]}}.
    Returns None when conceptGroup is missing, keeping upstream order otherwise.
    """
    if container is None:
        return None
    if not isinstance(container, dict):
        raise UpstreamMalformedError("RxNav returned an unexpected group shape")
    raw_groups = container.get("conceptGroup")
    if not raw_groups:
        return None
    if not isinstance(raw_groups, list):
        raise UpstreamMalformedError("RxNav conceptGroup is not a list")

    groups: List[ConceptGroup] = []
    try:
        for g in raw_groups:
            if not isinstance(g, dict):
                continue
            tty = g.get("tty")
            props = g.get("conceptProperties") or []
            if not isinstance(props, list):
                raise UpstreamMalformedError("RxNav conceptProperties is not a list")
            concepts = []
            for p in props:
                if not isinstance(p, dict) or not p.get("rxcui"):
                    continue
                concepts.append(VocabularyConcept(
                    rxcui=str(p["rxcui"]),
                    name=p.get("name") or "",
                    tty=p.get("tty") or tty,
                ))
            groups.append(ConceptGroup(tty=tty, concepts=concepts))
    except ValidationError as e:
        raise UpstreamMalformedError(f"RxNav returned a concept with unexpected fields: {e.errors()[0].get('msg')}") from e
    return groups


class RxNavAdapter(VocabularyPort):
    def __init__(self, base_url: str = BASE, timeout: float = 5.0, client: httpx.AsyncClient | None = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    async def _get_json(self, path: str, params: Dict[str, Any] | None = None) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            if self._client is not None:
                res = await self._client.get(url, params=params, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout, headers={"User-Agent": UA}) as c:
                    res = await c.get(url, params=params)
            res.raise_for_status()
        except httpx.TimeoutException as e:
            raise UpstreamTransportError(f"RxNav request timed out after {self.timeout}s") from e
        except httpx.HTTPStatusError as e:
            raise UpstreamTransportError(
                f"RxNav returned HTTP {e.response.status_code} for {path}"
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamTransportError(str(e) or e.__class__.__name__) from e

        try:
            body = res.json()
        except ValueError as e:
            raise UpstreamMalformedError(f"RxNav returned non-JSON body for {path}") from e
        if not isinstance(body, dict):
            raise UpstreamMalformedError(f"RxNav returned unexpected JSON for {path}")
        return body

    async def search_drugs(self, name: str) -> Optional[List[ConceptGroup]]:
        logger.info("🔍 RxNav drugs search name=%r", name)
        body = await self._get_json("/drugs.json", params={"name": name})
        return _parse_groups(body.get("drugGroup"))

    async def all_related(self, rxcui: str) -> Optional[List[ConceptGroup]]:
        logger.info("📋 RxNav allrelated rxcui=%s", rxcui)
        body = await self._get_json(f"/rxcui/{quote(str(rxcui), safe='')}/allrelated.json")
        return _parse_groups(body.get("allRelatedGroup"))
