
import base64
import binascii
import io
import logging

logger = logging.getLogger(__name__)


def encode_data_url(content, mime_type):
    encoded = base64.b64encode(content).decode('ascii')
    return f'data:{mime_type};base64,{encoded}'


def decode_data_url(data_url):
    """Split a base64 data URL into (mime_type, raw bytes). Returns (None, None) when unreadable."""
    if not data_url or not data_url.startswith('data:') or ',' not in data_url:
        return None, None
    header, payload = data_url.split(',', 1)
    mime_type = header[len('data:'):].split(';')[0] or 'application/octet-stream'
    try:
        return mime_type, base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        logger.warning('Could not decode data URL: %s', e)
        return None, None


def image_to_data_url(img, quality):
    buffer = io.BytesIO()
    img.convert('RGB').save(buffer, format='JPEG', quality=quality)
    return encode_data_url(buffer.getvalue(), 'image/jpeg')


def uploaded_file_to_data_url(uploaded):
    uploaded.seek(0)
    content = uploaded.read()
    mime_type = getattr(uploaded, 'content_type', None) or 'application/octet-stream'
    return encode_data_url(content, mime_type)
