"""Unit tests for the provider-agnostic value objects.

Covers chat input assembly, attachments, chat/image/moderation options,
moderation results, capability overrides and MIME sniffing.
"""
from __future__ import annotations

import pytest
from pydantic import ValidationError

from omnihai_providers.base.mime import OCTET_STREAM, extension_for, guess_mime_type, is_image
from omnihai_providers.base.models import (
    Attachment,
    ChatInput,
    ChatInputBuilder,
    ChatOptions,
    GenerateImageOptions,
    HistoryMessage,
    ModerationCategory,
    ModerationOptions,
    ModerationResult,
    OPENAI_NATIVE_CATEGORIES,
    Role,
    ServiceCapabilities,
    ServiceContext,
    UploadedFile,
)


def test_mime_sniffing(png_bytes, pdf_bytes):
    assert guess_mime_type(png_bytes) == "image/png"  # nosec B101
    assert guess_mime_type(b"\xff\xd8\xff\xe0rest") == "image/jpeg"  # nosec B101
    assert guess_mime_type(b"GIF89a....") == "image/gif"  # nosec B101
    assert guess_mime_type(b"RIFF\x00\x00\x00\x00WEBPVP8 ") == "image/webp"  # nosec B101
    assert guess_mime_type(pdf_bytes) == "application/pdf"  # nosec B101
    assert guess_mime_type(b"plain text") == OCTET_STREAM  # nosec B101
    assert extension_for("image/jpeg") == "jpg"  # nosec B101
    assert extension_for("application/x-unknown") == "bin"  # nosec B101
    assert is_image("image/webp") and not is_image("application/pdf")  # nosec B101


def test_builder_classifies_and_names_attachments_by_position(png_bytes, pdf_bytes):
    chat_input = ChatInput.builder().message("Describe").attach(pdf_bytes, png_bytes, png_bytes).build()
    assert [i.file_name for i in chat_input.images] == ["image1.png", "image2.png"]  # nosec B101
    assert [f.file_name for f in chat_input.files] == ["file1.pdf"]  # nosec B101
    assert chat_input.files[0].mime_type == "application/pdf"  # nosec B101


def test_builder_reads_paths_lazily_for_files(tmp_path, png_bytes, pdf_bytes):
    doc = tmp_path / "report.pdf"
    doc.write_bytes(pdf_bytes)
    img = tmp_path / "photo.png"
    img.write_bytes(png_bytes)
    chat_input = ChatInput.builder().message("Hi").attach(doc, str(img)).build()
    assert chat_input.files[0].source == doc  # nosec B101
    assert chat_input.files[0].content is None  # nosec B101
    assert chat_input.images[0].content == png_bytes  # nosec B101
    assert chat_input.files[0].read_bytes() == pdf_bytes  # nosec B101


def test_builder_applies_image_sanitizer(png_bytes):
    builder = ChatInputBuilder(image_sanitizer=lambda data: data + b"!")
    chat_input = builder.message("x").attach(png_bytes).build()
    assert chat_input.images[0].content.endswith(b"!")  # nosec B101


@pytest.mark.parametrize("message", ["", "  ", None])
def test_chat_input_requires_message(message):
    with pytest.raises(ValueError):
        ChatInput(message=message)
    with pytest.raises(ValueError):
        ChatInput.builder().message(message).build()


def test_with_history_keeps_message():
    history = [HistoryMessage(Role.USER, "hi"), HistoryMessage("assistant", "hello")]
    chat_input = ChatInput.of("next").with_history(history)
    assert chat_input.history[1].role is Role.ASSISTANT  # nosec B101
    assert chat_input.message == "next"  # nosec B101


def test_history_and_uploaded_file_validation():
    with pytest.raises(ValueError):
        HistoryMessage(Role.USER, " ")
    with pytest.raises(ValueError):
        UploadedFile("", "application/pdf")


def test_attachment_requires_exactly_one_source(tmp_path):
    with pytest.raises(ValueError):
        Attachment(mime_type="image/png", file_name="a.png")
    with pytest.raises(ValueError):
        Attachment(mime_type="image/png", file_name="a.png", content=b"x", source=tmp_path / "a.png")


def test_attachment_metadata_is_cleaned_and_merged(png_bytes):
    attachment = Attachment(
        mime_type="image/png",
        file_name="a.png",
        content=png_bytes,
        metadata={" purpose ": " vision ", "blank": "  "},
    )
    assert attachment.metadata == {"purpose": "vision"}  # nosec B101
    merged = attachment.with_metadata("owner", "me").with_metadata_map({"purpose": "user_data"})
    assert merged.metadata == {"purpose": "user_data", "owner": "me"}  # nosec B101
    assert attachment.metadata == {"purpose": "vision"}  # nosec B101
    with pytest.raises(ValueError):
        attachment.with_metadata("", "x")


def test_attachment_data_uri(png_bytes):
    attachment = Attachment(mime_type="image/png", file_name="a.png", content=png_bytes)
    assert attachment.to_data_uri().startswith("data:image/png;base64,iVBORw0KGgo")  # nosec B101
    assert attachment.size() == len(png_bytes)  # nosec B101


def test_chat_options_presets_and_bounds():
    assert ChatOptions.DEFAULT.temperature == 0.7  # nosec B101
    assert ChatOptions.DETERMINISTIC.temperature == 0.0  # nosec B101
    assert ChatOptions.CREATIVE.temperature > ChatOptions.DEFAULT.temperature  # nosec B101
    with pytest.raises(ValidationError):
        ChatOptions(temperature=2.5)
    with pytest.raises(ValidationError):
        ChatOptions(max_tokens=0)
    with pytest.raises(ValidationError):
        ChatOptions(top_p=1.5)


def test_chat_options_derive_revalidates():
    derived = ChatOptions.DETERMINISTIC.with_system_prompt("Be brief").with_json_schema({"type": "object"})
    assert derived.temperature == 0.0  # nosec B101
    assert derived.system_prompt == "Be brief"  # nosec B101
    assert ChatOptions.DETERMINISTIC.system_prompt is None  # nosec B101
    with pytest.raises(ValidationError):
        derived.derive(temperature=-1)


def test_image_options_derive_aspect_ratio_from_size():
    assert GenerateImageOptions(size="1536x1024").aspect_ratio == "3:2"  # nosec B101
    assert GenerateImageOptions.DEFAULT.aspect_ratio == "1:1"  # nosec B101
    assert GenerateImageOptions(aspect_ratio="16:9").size == "auto"  # nosec B101
    with pytest.raises(ValidationError):
        GenerateImageOptions(size="big")
    with pytest.raises(ValidationError):
        GenerateImageOptions(aspect_ratio="wide")


def test_moderation_options_normalize_categories():
    options = ModerationOptions(categories=[ModerationCategory.HATE, "Spam"])
    assert options.categories == frozenset({"hate", "spam"})  # nosec B101
    assert options.sorted_categories() == ["hate", "spam"]  # nosec B101
    assert ModerationOptions.DEFAULT.categories == OPENAI_NATIVE_CATEGORIES  # nosec B101
    assert "pii" in ModerationOptions.DEFAULT.add_categories("pii").categories  # nosec B101
    assert ModerationOptions.STRICT.threshold < ModerationOptions.DEFAULT.threshold < ModerationOptions.LENIENT.threshold  # nosec B101
    with pytest.raises(ValidationError):
        ModerationOptions(categories=[])
    with pytest.raises(ValidationError):
        ModerationOptions(categories=["bad name"])
    with pytest.raises(ValidationError):
        ModerationOptions(threshold=1.5)


def test_moderation_category_native_flag():
    assert ModerationCategory.VIOLENCE.openai_native  # nosec B101
    assert not ModerationCategory.PII.openai_native  # nosec B101


def test_moderation_result_threshold_is_strict():
    at_threshold = ModerationResult.evaluate({"hate": 0.5}, 0.5)
    assert at_threshold.flagged is False  # nosec B101
    above = ModerationResult.evaluate({"hate": 0.5, "spam": 0.1}, 0.49)
    assert above.flagged is True  # nosec B101
    assert above.flagged_categories(0.49) == {"hate": 0.5}  # nosec B101
    assert above.highest_category() == "hate"  # nosec B101
    assert list(above.scores) == ["hate", "spam"]  # nosec B101
    assert ModerationResult.SAFE.highest_category() is None  # nosec B101
    assert ModerationResult.SAFE.highest_score() == 0.0  # nosec B101


def test_capability_overrides_and_service_name():
    caps = ServiceCapabilities(streaming=True).with_overrides(streaming=False, file_upload=1)
    assert caps.streaming is False and caps.file_upload is True  # nosec B101
    with pytest.raises(TypeError):
        caps.with_overrides(teleport=True)
    service = ServiceContext("openai", "OpenAI", "gpt-5-mini", caps)
    assert service.name == "OpenAI (gpt-5-mini)"  # nosec B101
    assert service.model_version.major == 5  # nosec B101
