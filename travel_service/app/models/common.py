from datetime import datetime, timezone


def utcnow():
    return datetime.now(timezone.utc)


class ImageMixin:
    """Image asset kept on the image host; only url and public id are stored."""

    @property
    def image(self):
        if not self.image_url:
            return None
        return {"url": self.image_url, "public_id": self.image_public_id}
