"""Token issuing and verification."""

from .jwt import JWTCodec, TokenValidationError, get_jwt_codec

__all__ = ["JWTCodec", "TokenValidationError", "get_jwt_codec"]
