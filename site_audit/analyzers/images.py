from site_audit.models import ImageInfo


def count_missing_alt(images: list[ImageInfo]) -> int:
    return sum(1 for img in images if not img.has_alt)


def analyze_images(images: list[ImageInfo]) -> list[str]:
    missing = count_missing_alt(images)
    if missing:
        return [f"{missing} images missing alt text"]
    return []
