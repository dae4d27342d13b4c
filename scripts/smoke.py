# scripts/smoke.py
"""
Smoke test script for the envsnap collector.

Usage
-----
1. Run against the bundled sample host state:
    $ python scripts/smoke.py

2. Run against your own host-state JSON:
    $ python scripts/smoke.py --file my_host.json
"""

import argparse
import asyncio
import logging
import sys
import traceback
from pathlib import Path

from dotenv import load_dotenv

from envsnap.collector import CollectionError, create_collector
from envsnap.core.contracts.snapshot import Snapshot
from envsnap.core.host import EventHub, HostEvent, MappingProvider

env_path = Path(".env")
if env_path.exists():
    load_dotenv(env_path)
    print("✅ Loaded .env file")

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

DEFAULT_HOST_STATE = Path(__file__).resolve().parent.parent / "samples" / "host_state.json"


async def exercise(provider: MappingProvider) -> list[Snapshot]:
    """Fire one of each trigger and return the snapshots in order."""
    window, document = EventHub("window"), EventHub("document")
    collector = create_collector(
        provider, window=window, document=document, debounce_seconds=0.05
    )
    produced: list[Snapshot] = []
    collector.on_update(produced.append)

    window.dispatch(HostEvent("load"))
    document.dispatch(HostEvent("click", tag="BUTTON"))
    for _ in range(3):
        window.dispatch(HostEvent("scroll"))
    await asyncio.sleep(0.1)
    document.dispatch(HostEvent("visibilitychange"))
    await collector.get_data()

    print(f"\n🕵️  Interaction history: {len(collector.history())} record(s)")
    collector.close()
    return produced


def main() -> None:
    """Execute the smoke test workflow."""
    parser = argparse.ArgumentParser(description="Run envsnap smoke test")
    parser.add_argument("--file", "-f", type=str, help="Path to a host-state JSON file")
    args = parser.parse_args()

    path = Path(args.file) if args.file else DEFAULT_HOST_STATE
    if not path.exists():
        print(f"❌ File not found: {path}")
        return
    print(f"\n📂 Using host state: {path}")

    try:
        produced = asyncio.run(exercise(MappingProvider.from_json(path)))
    except (CollectionError, ValueError) as exc:
        print(f"\n❌ Collection Crashed: {exc}")
        traceback.print_exc()
        return

    print("\n" + "=" * 60)
    print("✅ Smoke run finished")
    print("=" * 60)
    for i, snap in enumerate(produced, start=1):
        title = snap.tab_details.identity.title
        print(f"  {i}. {snap.trigger:<18} {snap.collected_at}  {title}")


if __name__ == "__main__":
    main()
