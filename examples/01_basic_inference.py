#!/usr/bin/env python3
"""Basic inference with the mock service.

Renders a template, runs it through the mock backend and prints the
normalized JSON content together with response metadata. No API key needed.
"""

import asyncio

from inference_port import InferenceRequest, MockInferenceService, ModelType


async def main():
    service = MockInferenceService().with_latency(25)

    print("🩺 Health:", (await service.health_check()).status.value)
    print("📚 Models:", ", ".join(service.supported_models()))

    for model_type in ModelType:
        request = InferenceRequest(
            template="Explain {{topic}} to a {{audience}}",
            parameters={"topic": "recursion", "audience": "new programmer"},
            model_type=model_type,
        ).with_metadata("example", "basic")

        response = await service.infer(request)
        usage = response.metadata.token_usage

        print(f"\n🤖 {model_type.value} -> {response.metadata.model}")
        print(f"   Content: {response.content}")
        print(
            f"   Tokens: {usage.prompt_tokens} + {usage.completion_tokens}"
            f" = {usage.total_tokens}, took {response.metadata.processing_time_ms}ms"
        )

    # Plain text responses come back as strings
    text_service = service.with_custom_response("Just a sentence.")
    response = await text_service.infer(InferenceRequest(template="Say something"))
    print(f"\n📝 Text content: {response.content!r}")


if __name__ == "__main__":
    asyncio.run(main())
