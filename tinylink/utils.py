import secrets
import string

from pydantic import AnyUrl, TypeAdapter, ValidationError

ALPHABET = string.ascii_letters + string.digits

_url_adapter = TypeAdapter(AnyUrl)

def generate_random_code(length: int = 6) -> str:
    return "".join(secrets.choice(ALPHABET) for _ in range(length))

def is_valid_url(value) -> bool:
    """True when value is an absolute URL with a scheme. Never touches the network."""
    if not isinstance(value, str) or not value.strip():
        return False
    try:
        _url_adapter.validate_python(value)
    except ValidationError:
        return False
    return True
