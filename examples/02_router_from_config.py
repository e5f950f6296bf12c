#!/usr/bin/env python3
"""Bring-your-own-key routing.

Builds a router from ``inference.yaml`` (see ``inference.example.yaml``).
Services whose key variable is not set are skipped, so this runs with no
keys at all and falls back to the mock service.

    OPENAI_API_KEY=sk-... python examples/02_router_from_config.py
"""

import asyncio
import sys

from inference_port import InferenceError, InferenceRequest, InferenceSettings
from inference_port.config import setup_router_from_config, setup_telemetry
from inference_port.config_validator import validate_settings


async def main(config_path: str | None = None):
    settings = InferenceSettings()
    validate_settings(settings)
    setup_telemetry(settings)

    router = setup_router_from_config(config_path or settings.config_path)
    print(f"🔌 Services: {router.list_services()} (default: {router.default_service})")

    for name, result in (await router.health_check_all()).items():
        print(f"   {name}: {result.status.value} {result.details}")

    request = InferenceRequest(
        template='Reply with a JSON object {"capital": ...} for {{country}}',
        parameters={"country": "Portugal"},
    ).with_max_tokens(64)

    try:
        response = await router.infer(request)
    except InferenceError as e:
        print(f"❌ {e.kind.value}: {e.message} (retryable={e.retryable})")
        return

    print(f"✅ {response.metadata.model}: {response.content}")


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else None))
