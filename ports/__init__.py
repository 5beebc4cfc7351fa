from .http import HttpFetcherPort, HttpResponse
from .llm import TextGeneratorPort
from .people import PeopleDataPort
from .sink import RecordSinkPort

__all__ = [
    "HttpFetcherPort",
    "HttpResponse",
    "TextGeneratorPort",
    "PeopleDataPort",
    "RecordSinkPort",
]
