"""Translation engine implementations.

Importing this package registers every engine with `TransInterface.registered`.

Modules:
- AsyncTranslator: Asynchronous client for the Google Translate web endpoint.
- DeeplTranslation: DeepL engine.
- GoogleCloudTranslation: Google Cloud Translation (v2) engine.
- GoogleTranslation: Google Translate web engine.
- PhrasebookTranslation: Offline last-resort phrase lookup.
"""

from core.trans.engines.async_google_translate import AsyncTranslator
from core.trans.engines.trans_deepl import DeeplTranslation
from core.trans.engines.trans_google import GoogleTranslation
from core.trans.engines.trans_google_cloud import GoogleCloudTranslation
from core.trans.engines.trans_phrasebook import PhrasebookTranslation

__all__: list[str] = [
    "AsyncTranslator",
    "DeeplTranslation",
    "GoogleCloudTranslation",
    "GoogleTranslation",
    "PhrasebookTranslation",
]
