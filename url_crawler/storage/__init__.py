"""url_crawler.storage: schema and transactional persistence."""

from url_crawler.storage.persister import Persister
from url_crawler.storage.schema import create_schema, make_engine

__all__ = ["Persister", "create_schema", "make_engine"]
