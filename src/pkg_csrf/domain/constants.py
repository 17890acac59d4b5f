from enum import Enum


CERTIFICATE_SEPARATOR = ":"

DEFAULT_ATTRIBUTE = "csrf"
DEFAULT_HEADER_NAME = "X-CSRF-Token"
DEFAULT_TTL = 60 * 20
DEFAULT_SAFE_METHODS = frozenset({"HEAD", "GET", "OPTIONS"})
DEFAULT_STATUS_ON_ERROR = 403
DEFAULT_ERROR_BODY = "Invalid or missing CSRF token!"


class DigestAlgorithm(Enum):
    RIPEMD160 = "ripemd160"
    SHA1 = "sha1"
    SHA224 = "sha224"
    SHA256 = "sha256"
    SHA384 = "sha384"
    SHA512 = "sha512"
    SHA3_256 = "sha3_256"
    SHA3_512 = "sha3_512"

    @property
    def is_legacy(self) -> bool:
        return self in (DigestAlgorithm.RIPEMD160, DigestAlgorithm.SHA1)

    @classmethod
    def parse(cls, value: "DigestAlgorithm | str") -> "DigestAlgorithm":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unsupported digest algorithm: {value!r}") from None


DEFAULT_ALGORITHM = DigestAlgorithm.RIPEMD160
