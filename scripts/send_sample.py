"""Post the bundled sample notifications to a running receiver, the way the plugin does.

Run: python scripts/send_sample.py --url http://127.0.0.1:8000/dink LOOT DEATH
     python scripts/send_sample.py --all --screenshot path/to/image.png
"""
import argparse
import asyncio
from pathlib import Path

import httpx

from dinkhook.samples import SAMPLE_PAYLOADS, sample_json

BASE = "http://127.0.0.1:8000/dink"


async def send(client: httpx.AsyncClient, url: str, event_type: str, screenshot: bytes | None = None):
    files = {"payload_json": (None, sample_json(event_type))}
    if screenshot is not None:
        files["file"] = ("image.png", screenshot, "image/png")
    r = await client.post(url, files=files)
    print(event_type, r.status_code, r.text)
    return r


async def run(url: str, types, screenshot: Path | None):
    image = screenshot.read_bytes() if screenshot else None
    async with httpx.AsyncClient(timeout=10.0) as client:
        for t in types:
            await send(client, url, t, image)
        r = await client.get(url.rsplit("/", 1)[0] + "/stats")
        print("stats", r.json())


def main():
    ap = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    ap.add_argument("types", nargs="*", help="notification types to send (default LOOT)")
    ap.add_argument("--url", default=BASE)
    ap.add_argument("--all", action="store_true", help="send every sample type")
    ap.add_argument("--screenshot", type=Path, help="image to attach as the file part")
    args = ap.parse_args()
    types = sorted(SAMPLE_PAYLOADS) if args.all else (args.types or ["LOOT"])
    unknown = [t for t in types if t not in SAMPLE_PAYLOADS]
    if unknown:
        ap.error(f"no sample for {', '.join(unknown)}")
    asyncio.run(run(args.url, types, args.screenshot))


if __name__ == '__main__':
    main()
