"""Client for a remote asynchronous analysis service.

Submits work, polls the job with bounded exponential backoff until it
finishes, and returns the issues found.  Bearer tokens are obtained,
cached and refreshed transparently around every authenticated call.
"""

from analysis_client.orchestrators.client import Client, api_version, openapi_spec

__version__ = "0.1.0"

__all__ = ["Client", "__version__", "api_version", "openapi_spec"]
