import logging

from lxml import etree # type: ignore

from app.models import EpgDocument, MergedChannel, MergedProgramme

logger = logging.getLogger(__name__)

DEFAULT_GENERATOR_NAME = "Bangladesh EPG Generator"
DEFAULT_LANGUAGE = "bn"


def build_xmltv_document(
    document: EpgDocument,
    generator_name: str = DEFAULT_GENERATOR_NAME,
    generator_url: str = "",
    language: str = DEFAULT_LANGUAGE
) -> bytes:
    """
    Serialize merged EPG data as an XMLTV document

    Args:
        document: Merged channels and programmes
        generator_name: Value of the generator-info-name attribute
        generator_url: Value of the generator-info-url attribute
        language: lang attribute for title and desc elements

    Returns:
        Pretty-printed UTF-8 XML with an XML 1.0 declaration

    Raises:
        ValueError: If text contains characters XML cannot represent
    """
    root = etree.Element("tv", {
        "generator-info-name": generator_name,
        "generator-info-url": generator_url,
    })

    for channel in document.channels:
        _append_channel(root, channel)

    for programme in document.programmes:
        _append_programme(root, programme, language)

    xml = etree.tostring(root, pretty_print=True, xml_declaration=True, encoding="UTF-8")
    logger.info(
        f"XMLTV document built: {len(document.channels)} channels, "
        f"{len(document.programmes)} programmes, {len(xml) / 1024:.1f} KB"
    )
    return xml


def _append_channel(root: etree._Element, channel: MergedChannel) -> None:
    """Add a <channel> element"""
    element = etree.SubElement(root, "channel", id=channel.id)
    etree.SubElement(element, "display-name").text = channel.display_name

    if channel.category:
        etree.SubElement(element, "category").text = channel.category

    if channel.logo_url:
        etree.SubElement(element, "icon", src=channel.logo_url)


def _append_programme(root: etree._Element, programme: MergedProgramme, language: str) -> None:
    """Add a <programme> element"""
    element = etree.SubElement(root, "programme", {
        "start": programme.start,
        "stop": programme.stop,
        "channel": programme.channel_id,
    })
    etree.SubElement(element, "title", lang=language).text = programme.title
    etree.SubElement(element, "desc", lang=language).text = programme.description
