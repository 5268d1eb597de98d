from __future__ import annotations
import httpx
from typing import Any, Dict, List, Optional
from pydantic import BaseModel
from .settings import settings


class PassageUnavailable(Exception):
	"""The Qur'an API could not deliver a usable passage or passage list."""


class PassageSummary(BaseModel):
	id: int
	name: str
	latin_name: str
	verse_count: int


class QuranClient:
	def __init__(
		self,
		base_url: Optional[str] = None,
		*,
		timeout: Optional[float] = None,
		number_verses: Optional[bool] = None,
		transport: Optional[httpx.AsyncBaseTransport] = None,
	) -> None:
		self.base_url = (base_url or settings.quran_api_base_url).rstrip("/")
		self.timeout = timeout if timeout is not None else settings.quran_api_timeout_seconds
		self.number_verses = settings.quran_number_verses if number_verses is None else number_verses
		self._client = httpx.AsyncClient(timeout=self.timeout, transport=transport)

	async def fetch_passage(self, passage_id: str) -> str:
		data = await self._get_json(f"{self.base_url}/surat/{passage_id}")
		try:
			verses = data["data"]["ayat"]
		except (KeyError, TypeError):
			raise PassageUnavailable(f"Passage {passage_id}: response has no verse list")
		if not isinstance(verses, list) or not verses:
			raise PassageUnavailable(f"Passage {passage_id}: verse list is empty")
		return self._join_verses(verses)

	async def list_passages(self) -> List[PassageSummary]:
		data = await self._get_json(f"{self.base_url}/surat")
		entries = data.get("data") if isinstance(data, dict) else None
		if not isinstance(entries, list):
			raise PassageUnavailable("Passage list: response has no data array")
		passages: List[PassageSummary] = []
		for entry in entries:
			try:
				passages.append(PassageSummary(
					id=int(entry["nomor"]),
					name=str(entry.get("nama", "")),
					latin_name=str(entry.get("namaLatin", "")),
					verse_count=int(entry.get("jumlahAyat", 0)),
				))
			except (KeyError, TypeError, ValueError) as err:
				raise PassageUnavailable(f"Passage list: malformed entry {entry!r}") from err
		return passages

	def _join_verses(self, verses: List[Dict[str, Any]]) -> str:
		blocks: List[str] = []
		for verse in verses:
			if not isinstance(verse, dict) or "teksArab" not in verse:
				raise PassageUnavailable(f"Malformed verse entry: {verse!r}")
			body = str(verse["teksArab"]).strip()
			number = verse.get("nomorAyat")
			if self.number_verses and number is not None:
				blocks.append(f"{number}. {body}")
			else:
				blocks.append(body)
		return "\n\n".join(blocks)

	async def _get_json(self, url: str) -> Any:
		try:
			r = await self._client.get(url)
			r.raise_for_status()
		except httpx.HTTPStatusError as http_err:
			raise PassageUnavailable(f"{url} returned HTTP {http_err.response.status_code}") from http_err
		except httpx.RequestError as net_err:
			raise PassageUnavailable(f"{url} request failed: {net_err!r}") from net_err
		try:
			return r.json()
		except ValueError as err:
			raise PassageUnavailable(f"{url} did not return JSON") from err

	async def aclose(self) -> None:
		await self._client.aclose()
