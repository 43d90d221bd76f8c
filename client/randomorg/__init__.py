from randomorg_wire.convert import ApiKeyStatus

from randomorg.client import RandomOrgClient
from randomorg.errors import (
    RandomOrgError,
    RandomOrgFormatError,
    RandomOrgParameterError,
    RandomOrgRangeError,
    RandomOrgServiceError,
    RandomOrgShapeError,
    RandomOrgTransportError,
)
from randomorg.models import (
    BlobParameters,
    DecimalFractionParameters,
    GaussianParameters,
    GenerationResult,
    IntegerParameters,
    IntegerSequenceParameters,
    Random,
    RandomLicense,
    RandomParameters,
    RandomUsage,
    SignedRandom,
    StringParameters,
    UuidParameters,
)
from randomorg.settings import ClientSettings

__all__ = [
    "ApiKeyStatus",
    "BlobParameters",
    "ClientSettings",
    "DecimalFractionParameters",
    "GaussianParameters",
    "GenerationResult",
    "IntegerParameters",
    "IntegerSequenceParameters",
    "Random",
    "RandomLicense",
    "RandomOrgClient",
    "RandomOrgError",
    "RandomOrgFormatError",
    "RandomOrgParameterError",
    "RandomOrgRangeError",
    "RandomOrgServiceError",
    "RandomOrgShapeError",
    "RandomOrgTransportError",
    "RandomParameters",
    "RandomUsage",
    "SignedRandom",
    "StringParameters",
    "UuidParameters",
]
