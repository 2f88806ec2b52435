"""
livecheck backend package.

Design intent:
- Turn a live recognizer stream into closed utterances.
- Verify each utterance asynchronously and keep an append-only history.
- Keep domain modules (asr/verify/internal_core) independent from the API layer.
"""
