import asyncio
import base64
import json
import os
import sys

# Add project root to path so we can import reelchat
sys.path.append(os.getcwd())

from reelchat.config.settings import settings
from reelchat.pipelines.composite import CompositeChatPipeline
from reelchat.services import build_providers


async def main():
    pipeline = CompositeChatPipeline(build_providers(settings), temp_dir=settings.temp_dir)

    file_path = "out.mp3"
    if len(sys.argv) > 1:
        file_path = sys.argv[1]

    if not os.path.exists(file_path):
        print(f"File '{file_path}' not found. Please provide a path to an audio file.")
        print("Usage: python scripts/test_transcribe.py [path/to/audio.mp3] [video description]")
        return

    print(f"Reading {file_path}...")
    with open(file_path, "rb") as f:
        audio_b64 = base64.b64encode(f.read()).decode("ascii")

    body = {
        "audioData": audio_b64,
        "fileName": os.path.basename(file_path),
        "mimeType": "audio/mpeg",
    }

    print(f"Transcribing {len(audio_b64)} base64 characters with {settings.openai.transcription_model}...")
    outcome = await pipeline.transcribe(body)
    print("\n--- Transcript Result ---")
    print(json.dumps(outcome.body, indent=2, ensure_ascii=False))
    print("-------------------------")

    if len(sys.argv) > 2 and outcome.success:
        body["videoDescription"] = sys.argv[2]
        outcome = await pipeline.run(body)
        print("\n--- Chat Result ---")
        print(json.dumps(outcome.body, indent=2, ensure_ascii=False))
        print("-------------------")


if __name__ == "__main__":
    asyncio.run(main())
