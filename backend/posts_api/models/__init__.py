from posts_api.models.post import Post

__all__ = ["Post"]
