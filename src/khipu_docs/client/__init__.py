"""HTTP client module for khipu-docs.

Provides :class:`ApiClient`, a blocking client backed by
:class:`httpx.Client` that forwards authenticated requests to the Khipu
payment API, and :class:`PaymentsApi`, typed wrappers for the individual
endpoints.

Both are only used by the ``api`` command group; the documentation
commands work without an API key.

Example::

    from khipu_docs.client import ApiClient, PaymentsApi

    with ApiClient(settings, api_key) as client:
        banks = PaymentsApi(client).get_banks()
"""

from khipu_docs.client.api_client import ApiClient
from khipu_docs.client.payments import PaymentsApi

__all__ = ["ApiClient", "PaymentsApi"]
