import asyncio
from typing import Dict, List, Set

import httpx
import pytest

from quran_screening.quran_client import QuranClient


BASE_URL = "https://quran.test/api/v2"

SURAHS: Dict[int, List[str]] = {
    1: [
        "بِسْمِ اللّٰهِ الرَّحْمٰنِ الرَّحِيْمِ",
        "اَلْحَمْدُ لِلّٰهِ رَبِّ الْعٰلَمِيْنَۙ",
    ],
    112: [
        "قُلْ هُوَ اللّٰهُ اَحَدٌۚ",
        "اَللّٰهُ الصَّمَدُۚ",
    ],
    114: [
        "قُلْ اَعُوْذُ بِرَبِّ النَّاسِۙ",
    ],
}

NAMES = {1: ("الفاتحة", "Al-Fatihah"), 112: ("الإخلاص", "Al-Ikhlas"), 114: ("الناس", "An-Nas")}


class FakeQuranApi:
    """In-process stand-in for the equran.id v2 endpoints.

    ``fail`` holds surah numbers that raise a connection error, ``gates``
    holds events a request waits on before answering.
    """

    def __init__(self) -> None:
        self.calls: List[str] = []
        self.fail: Set[int] = set()
        self.offline = False
        self.gates: Dict[int, asyncio.Event] = {}

    async def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.calls.append(path)
        if self.offline:
            raise httpx.ConnectError("network unreachable", request=request)
        tail = path.rsplit("/surat", 1)[-1].strip("/")
        if not tail:
            data = [
                {"nomor": n, "nama": NAMES[n][0], "namaLatin": NAMES[n][1], "jumlahAyat": len(v)}
                for n, v in SURAHS.items()
            ]
            return httpx.Response(200, json={"code": 200, "data": data})
        number = int(tail)
        gate = self.gates.get(number)
        if gate is not None:
            await gate.wait()
        if number in self.fail:
            raise httpx.ConnectError("connection reset", request=request)
        if number not in SURAHS:
            return httpx.Response(404, json={"code": 404, "message": "Not found"})
        ayat = [{"nomorAyat": i + 1, "teksArab": text, "teksIndonesia": "..."} for i, text in enumerate(SURAHS[number])]
        return httpx.Response(200, json={"code": 200, "data": {"nomor": number, "ayat": ayat}})

    def count(self, number: int) -> int:
        return sum(1 for p in self.calls if p.endswith(f"/surat/{number}"))


def expected_text(number: int) -> str:
    return "\n\n".join(f"{i + 1}. {text}" for i, text in enumerate(SURAHS[number]))


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def fake_api() -> FakeQuranApi:
    return FakeQuranApi()


@pytest.fixture
def quran_client(fake_api: FakeQuranApi) -> QuranClient:
    return QuranClient(base_url=BASE_URL, number_verses=True, transport=httpx.MockTransport(fake_api.handler))
