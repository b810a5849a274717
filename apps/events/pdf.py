import io
import logging

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

logger = logging.getLogger(__name__)

CARDS_PER_ROW = 2
CARDS_PER_COLUMN = 4
MARGIN = 10 * mm
PADDING = 4 * mm


def _card_lines(event):
    speakers = ", ".join(str(person) for person in event.speakers) or "-"
    lines = [
        f"Speakers: {speakers}",
        f"Type: {event.get_event_type_display()}",
        f"Track: {event.track.name if event.track else '-'}",
        f"Duration: {event.time_slots * event.conference.timeslot_duration} min",
        f"State: {event.get_state_display()}",
    ]
    if event.average_rating is not None:
        lines.append(
            f"Rating: {event.average_rating:.1f} ({event.event_ratings_count} ratings)"
        )
    return lines


def _truncate(text, pdf, font, size, width):
    if pdf.stringWidth(text, font, size) <= width:
        return text
    while text and pdf.stringWidth(text + "...", font, size) > width:
        text = text[:-1]
    return text + "..."


def render_event_cards(events) -> bytes:
    """Render one card per event, eight to an A4 page, for schedule planning."""
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4)
    page_width, page_height = A4
    card_width = (page_width - 2 * MARGIN) / CARDS_PER_ROW
    card_height = (page_height - 2 * MARGIN) / CARDS_PER_COLUMN
    per_page = CARDS_PER_ROW * CARDS_PER_COLUMN

    count = 0
    for index, event in enumerate(events):
        slot = index % per_page
        if index and slot == 0:
            pdf.showPage()
        column = slot % CARDS_PER_ROW
        row = slot // CARDS_PER_ROW
        x = MARGIN + column * card_width
        y = page_height - MARGIN - (row + 1) * card_height
        pdf.rect(x, y, card_width, card_height)

        text_width = card_width - 2 * PADDING
        cursor = y + card_height - PADDING - 12
        pdf.setFont("Helvetica-Bold", 12)
        pdf.drawString(
            x + PADDING,
            cursor,
            _truncate(event.title, pdf, "Helvetica-Bold", 12, text_width),
        )
        if event.subtitle:
            cursor -= 12
            pdf.setFont("Helvetica-Oblique", 9)
            pdf.drawString(
                x + PADDING,
                cursor,
                _truncate(event.subtitle, pdf, "Helvetica-Oblique", 9, text_width),
            )
        pdf.setFont("Helvetica", 9)
        for line in _card_lines(event):
            cursor -= 12
            pdf.drawString(
                x + PADDING, cursor, _truncate(line, pdf, "Helvetica", 9, text_width)
            )
        pdf.setFont("Helvetica", 7)
        pdf.drawRightString(x + card_width - PADDING, y + PADDING, f"#{event.pk}")
        count += 1

    if count == 0:
        pdf.setFont("Helvetica", 12)
        pdf.drawString(MARGIN, page_height - MARGIN - 12, "No events.")
    pdf.save()
    logger.info(f"Rendered {count} event card(s)")
    return buffer.getvalue()
