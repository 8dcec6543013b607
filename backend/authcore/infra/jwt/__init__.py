from .pyjwt_token_codec import PyJWTTokenCodec

__all__ = ["PyJWTTokenCodec"]
