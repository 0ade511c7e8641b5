import logging
from logging import Logger
from typing import Any, Dict, Mapping, Optional

import requests

from .config import (
    DEFAULT_OPERATOR,
    EFETCH_PATH,
    EINFO_PATH,
    ESEARCH_PATH,
    ESUMMARY_PATH,
    USER_AGENT,
)
from .exceptions import TransportError
from .models import ClientSettings
from .query import SearchTerms, build_search_term, convert_search_term_hash, encode_query
from .rate_limiter import RateLimiter, default_rate_limiter

logger: Logger = logging.getLogger(__name__)


class EntrezClient:
    """
    Client for the NCBI Entrez E-utilities with shared rate limiting.

    Every operation returns the raw ``requests.Response``; parsing the XML
    or JSON body is left to the caller.
    """

    convert_search_term_hash = staticmethod(convert_search_term_hash)

    def __init__(
        self,
        settings: Optional[ClientSettings] = None,
        *,
        email: Optional[str] = None,
        rate_limiter: Optional[RateLimiter] = None,
        session: Optional[requests.Session] = None,
        **setting_overrides: Any,
    ):
        """
        Initialize Entrez client.

        Args:
            settings: Validated client settings
            email: Contact email; read from ENTREZ_EMAIL when neither this
                nor settings is given
            rate_limiter: Limiter to admit requests through (default: the
                process-wide shared limiter)
            session: Optional requests session to issue requests with
            **setting_overrides: Extra ClientSettings fields (tool, base_url,
                timeout, raise_for_status)

        Raises:
            ConfigurationError: If no valid contact email is configured
        """
        if settings is None:
            if email is not None:
                settings = ClientSettings.build(email=email, **setting_overrides)
            else:
                settings = ClientSettings.from_env(**setting_overrides)
        elif email is not None or setting_overrides:
            values = settings.model_dump()
            values.update(setting_overrides)
            if email is not None:
                values["email"] = email
            settings = ClientSettings.build(**values)

        self.settings = settings
        self.rate_limiter = rate_limiter if rate_limiter is not None else default_rate_limiter()

        if session is None:
            session = requests.Session()
            session.headers.update({"User-Agent": USER_AGENT})
        self.session = session

        logger.info(
            f"Initialized Entrez client (base_url={settings.base_url}, "
            f"tool={settings.tool}, timeout={settings.timeout})"
        )

    @property
    def default_params(self) -> Dict[str, str]:
        """Query parameters attached to every request (tool and email)."""
        return self.settings.default_params

    def perform(
        self,
        endpoint_path: str,
        database: Optional[str],
        params: Optional[Mapping[str, Any]] = None,
    ) -> requests.Response:
        """
        Issue a rate-limited GET against an E-utilities endpoint.

        Query parameters are the default parameters, overridden by ``params``,
        with ``db`` always set to ``database`` (omitted when it is None).
        """
        query: Dict[str, Any] = dict(self.default_params)
        query.update(params or {})
        if database is not None:
            query["db"] = database
        else:
            query.pop("db", None)

        url = f"{self.settings.base_url}{endpoint_path}"
        query_string = encode_query(query)

        self.rate_limiter.admit()

        try:
            logger.debug(f"Request: {url}?{query_string}")
            response = self.session.get(
                url,
                params=query_string,
                timeout=self.settings.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Request failed: {e}")
            raise TransportError(
                f"Entrez request failed: {e}",
                status_code=getattr(e.response, "status_code", None),
            ) from e

        logger.debug(f"Response: {endpoint_path} status={response.status_code}")

        if self.settings.raise_for_status:
            try:
                response.raise_for_status()
            except requests.HTTPError as e:
                raise TransportError(
                    f"Entrez returned HTTP {response.status_code} for {endpoint_path}",
                    status_code=response.status_code,
                ) from e

        return response

    def fetch(
        self,
        database: str,
        params: Optional[Mapping[str, Any]] = None,
    ) -> requests.Response:
        """
        Fetch full records with EFetch.

        E.g. ``client.fetch("snp", {"id": 123, "retmode": "xml"})``
        """
        return self.perform(EFETCH_PATH, database, params)

    def info(
        self,
        database: Optional[str] = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> requests.Response:
        """
        Describe a database with EInfo, or list all databases when none is given.

        E.g. ``client.info("gene", {"retmode": "xml"})``
        """
        return self.perform(EINFO_PATH, database, params)

    def search(
        self,
        database: str,
        search_terms: Optional[SearchTerms] = None,
        params: Optional[Mapping[str, Any]] = None,
        operator: str = DEFAULT_OPERATOR,
    ) -> requests.Response:
        """
        Search a database with ESearch.

        ``search_terms`` is either a literal Entrez term or a mapping of field
        tags to values, e.g.
        ``client.search("genomeprj", {"WORD": "hapmap", "SEQS": "inprogress"})``

        Raises:
            UnknownOperator: If operator is not AND or OR
        """
        query = dict(params or {})
        query["term"] = build_search_term(search_terms or {}, operator)
        return self.perform(ESEARCH_PATH, database, query)

    def summary(
        self,
        database: str,
        params: Optional[Mapping[str, Any]] = None,
    ) -> requests.Response:
        """
        Fetch document summaries with ESummary.

        E.g. ``client.summary("snp", {"id": 123, "retmode": "xml"})``
        """
        return self.perform(ESUMMARY_PATH, database, params)

    def close(self):
        """Close the HTTP session."""
        self.session.close()
        logger.info("Closed Entrez client session")

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
