# scripts/smoke.py
"""
Smoke Test Script for the fluidflow conversation loop.

Sends one prompt through a real Gemini session in a throwaway flow store and
prints what came back: reply text, dispatched tools, artifacts and task lists.

Usage
-----
1. Use the default prompt:
    $ uv run python scripts/smoke.py

2. Use one of the built-in starter prompts, or your own text:
    $ uv run python scripts/smoke.py --catalyst "API Integration"
    $ uv run python scripts/smoke.py --prompt "Draft a rollout plan for feature flags"

Requires GOOGLE_API_KEY (read from the environment or `.env`).
"""

import argparse
import asyncio
import logging
import sys
import tempfile
import traceback
from pathlib import Path

from dotenv import load_dotenv

from fluidflow.core.controller import ConversationController
from fluidflow.core.persistence import JsonFileKeyValueStore
from fluidflow.core.settings import load_settings
from fluidflow.llm.gateway import GeminiGateway
from fluidflow.llm.prompts import CATALYSTS

# --------------------------------------------------------------------------- #
# Environment Setup
# --------------------------------------------------------------------------- #
env_path = Path(".env")
if env_path.exists():
    load_dotenv(env_path)
    print("✅ Loaded .env file")
else:
    print("⚠️  Warning: No .env file found! The gateway may fail due to a missing key.")

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

DEFAULT_PROMPT = (
    "Outline a three-step plan for migrating a cron job to a queue worker. "
    "Present the plan as an artifact and give me a task list for the first week."
)


def main() -> None:
    """Execute the smoke test workflow."""
    parser = argparse.ArgumentParser(description="Run a fluidflow smoke test")
    parser.add_argument("--prompt", "-p", type=str, help="Text to send")
    parser.add_argument("--catalyst", "-c", type=str, help="Name of a starter prompt")
    parser.add_argument("--model", "-m", type=str, default=None, help="Model alias or id")
    args = parser.parse_args()

    # 1. Pick the prompt
    if args.catalyst:
        if args.catalyst not in CATALYSTS:
            print(f"❌ Unknown catalyst: {args.catalyst}. Choose from: {', '.join(CATALYSTS)}")
            return
        prompt = CATALYSTS[args.catalyst]
    else:
        prompt = args.prompt or DEFAULT_PROMPT
    print(f"\n📝 Prompt: {prompt[:120]}...")

    # 2. Wire a controller over a temporary store
    cfg = load_settings()
    store_path = Path(tempfile.mkdtemp(prefix="fluidflow-smoke-")) / "store.json"
    gateway = GeminiGateway.from_env(args.model or cfg.model_alias, cfg.gateway_timeout)
    controller = ConversationController(
        JsonFileKeyValueStore(store_path), gateway, gateway_timeout=cfg.gateway_timeout
    )
    controller.start()

    # 3. Execution Phase
    try:
        print(f"... Sending to {gateway.client.model.name} ...")
        outcome = asyncio.run(controller.submit(prompt))
    except Exception as exc:
        print(f"\n❌ Smoke run crashed: {exc}")
        traceback.print_exc()
        return

    # 4. Inspection Phase
    print("\n" + "=" * 60)
    if outcome.failed:
        print("❌ Gateway request failed (see log above).")
    else:
        print("✅ Round trip finished successfully!")
    print("=" * 60)

    if outcome.reply_message is not None:
        print(f"\n💬 Reply: {outcome.reply_message.text[:300]}")

    print("\n🔧 Dispatched tools:")
    for result in outcome.dispatched:
        print(f"  - {result.name}: {result.status.value}")
        if result.task_list is not None:
            for task in result.task_list.tasks:
                print(f"      [{task.priority}] {task.title}")

    flow = controller.active_flow
    print("\n📦 Artifacts:")
    for artifact in flow.artifacts:
        print(f"  - {artifact.id} | {artifact.type} | {artifact.title} ({len(artifact.content)} chars)")

    print(f"\n💾 Store written to: {store_path}")


if __name__ == "__main__":
    main()
