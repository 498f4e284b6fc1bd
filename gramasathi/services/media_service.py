from gramasathi.errors import ValidationError
from gramasathi.utils import s3_helpers
from gramasathi.utils.media_validators import (
    validate_content_type,
    validate_filename,
    validate_size,
)


def store_images(files, *, folder: str, owner_id: str, max_count: int, max_bytes: int):
    """
    Validate every uploaded file before writing any of them, then push them to
    object storage. Returns the public URLs in upload order.
    """
    files = [f for f in (files or []) if f and f.filename]
    if len(files) > max_count:
        raise ValidationError(
            f"At most {max_count} images allowed", {"images": "too many files"}
        )

    prepared = []
    for f in files:
        data = f.read()
        for ok, err in (
            validate_filename(f.filename),
            validate_content_type(f.mimetype),
            validate_size(len(data), max_bytes),
        ):
            if not ok:
                raise ValidationError(err, {"images": f"{f.filename}: {err}"})
        prepared.append((f.filename, data, f.mimetype))

    urls = []
    for filename, data, content_type in prepared:
        key = s3_helpers.make_key(folder, owner_id, filename)
        s3_helpers.put_object(key, data, content_type)
        urls.append(s3_helpers.public_url(key))
    return urls
