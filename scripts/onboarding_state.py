"""
scripts/onboarding_state.py
────────────────────────────────────────────────────────────────────────
Inspect or reset the persisted onboarding state:

    python -m scripts.onboarding_state show
    python -m scripts.onboarding_state reset
"""
from __future__ import annotations

import asyncio
from argparse import ArgumentParser

from dotenv import load_dotenv
load_dotenv()

from core.errors import CorruptState, MissingState
from core.navigation import Reset
from core.persistence import KeyValueStore, load_state, read_entries
from core.session import OnboardingSession
from services.db import SqlKeyValueStore, init_db


async def _show(store: KeyValueStore) -> None:
    entries = await read_entries(store)
    for key, value in entries.items():
        print(f"  {key:<17} {value.decode('utf-8', 'replace') if value is not None else '–'}")
    try:
        state = load_state(entries)
    except MissingState:
        print("· nothing stored – app starts at account creation")
        return
    except CorruptState as e:
        print(f"! stored state is corrupt ({e}) – app will start over")
        return
    print(
        f"✓ {state.current_view.value} / {state.user_progress.value}"
        f" · question {state.question_index} · progress {state.progress:.2f}"
    )


async def _reset(store: KeyValueStore) -> None:
    session = OnboardingSession(store, fresh_start=True)
    await session.load()
    await session.dispatch(Reset())
    await session.close()
    print("✓ onboarding state reset")


# ───────────────────────────────
# CLI entrypoint
# ───────────────────────────────
async def _async_main() -> None:
    ap = ArgumentParser()
    ap.add_argument("command", choices=("show", "reset"))
    args = ap.parse_args()

    await init_db()
    store = SqlKeyValueStore()
    if args.command == "show":
        await _show(store)
    else:
        await _reset(store)


if __name__ == "__main__":  # pragma: no cover
    asyncio.run(_async_main())
