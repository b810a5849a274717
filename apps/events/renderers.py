from rest_framework.renderers import BaseRenderer, JSONRenderer


class PDFRenderer(BaseRenderer):
    """
    Lets clients negotiate ``application/pdf``. Views hand over ready PDF
    bytes; error payloads are rendered as JSON.
    """

    media_type = "application/pdf"
    format = "pdf"
    charset = None
    render_style = "binary"

    def render(self, data, accepted_media_type=None, renderer_context=None):
        if isinstance(data, (bytes, bytearray)):
            return bytes(data)
        return JSONRenderer().render(data, renderer_context=renderer_context)
