"""API resources."""

from .external_api_keys import ExternalApiKeysResource
from .files import FilesResource
from .integrations import IntegrationsResource
from .messaging import MessagingResource
from .people import PeopleResource
from .responses import ResponsesResource
from .sequences import SequencesResource
from .skills import SkillsResource
from .tenant_info import TenantInfoResource
from .threads import ThreadsResource
from .users import UsersResource

__all__ = [
    "ExternalApiKeysResource",
    "FilesResource",
    "IntegrationsResource",
    "MessagingResource",
    "PeopleResource",
    "ResponsesResource",
    "SequencesResource",
    "SkillsResource",
    "TenantInfoResource",
    "ThreadsResource",
    "UsersResource",
]
