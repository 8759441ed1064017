from typing import List

import pytest

from config.exceptions import FileAlreadyExistsError, ModelGenerationError, UploadError
from services.llm.gemini_client import ModelResponse
from services.pipeline import ClassificationPipeline
from services.storage.github_uploader import GitHubUploader, UploadRecord
from services.storage.sequencer import CategorySequencer

from conftest import JPEG_BYTES, PNG_BYTES


class ScriptedClient:
    """Returns canned responses per image content."""

    def __init__(self, responses):
        self.responses = responses
        self.prompts: List[str] = []

    def classify_image(self, image, prompt):
        self.prompts.append(prompt)
        answer = self.responses[image]
        if isinstance(answer, Exception):
            raise answer
        return ModelResponse(text=answer, total_tokens=10)


class RecordingUploader(GitHubUploader):
    def __init__(self, fail_paths=()):
        super().__init__(repo="owner/repo", token="t")
        self.fail_paths = set(fail_paths)
        self.records: List[UploadRecord] = []

    def upload(self, record):
        if record.destination_path in self.fail_paths:
            self.fail_paths.discard(record.destination_path)
            raise UploadError("boom", status_code=500)
        self.records.append(record)


def _pipeline(client, uploader, offsets=None, allowed=("A", "B"), dry_run=False):
    return ClassificationPipeline(
        client=client,
        uploader=uploader,
        sequencer=CategorySequencer.from_offsets(offsets or {}),
        allowed_categories=list(allowed),
        upload_dir="imgs",
        dry_run=dry_run,
    )


def test_sequence_numbers_follow_upload_order(image_folder):
    contents = {}
    for i, name in enumerate(["1.jpg", "2.jpg", "3.jpg"]):
        data = JPEG_BYTES + bytes([i])
        (image_folder / name).write_bytes(data)
        contents[data] = '{"cate":["A"]}'

    uploader = RecordingUploader()
    stats = _pipeline(ScriptedClient(contents), uploader, offsets={"A": 5}).run(image_folder)

    assert [r.destination_path for r in uploader.records] == ["imgs/A/5.jpg", "imgs/A/6.jpg", "imgs/A/7.jpg"]
    assert stats.uploaded == 3
    assert stats.tokens == 30


def test_failed_upload_does_not_consume_number(image_folder):
    contents = {}
    for i, name in enumerate(["1.jpg", "2.jpg", "3.jpg"]):
        data = JPEG_BYTES + bytes([i])
        (image_folder / name).write_bytes(data)
        contents[data] = '{"cate":["A"]}'

    uploader = RecordingUploader(fail_paths={"imgs/A/6.jpg"})
    pipeline = _pipeline(ScriptedClient(contents), uploader, offsets={"A": 5})
    stats = pipeline.run(image_folder)

    assert [r.source_path.rsplit("/", 1)[-1] for r in uploader.records] == ["1.jpg", "3.jpg"]
    assert [r.destination_path for r in uploader.records] == ["imgs/A/5.jpg", "imgs/A/6.jpg"]
    assert stats.upload_failed == 1
    assert pipeline.sequencer.peek("A") == 7


def test_each_category_uploaded_and_unlisted_passed_through(image_folder):
    (image_folder / "pic.png").write_bytes(PNG_BYTES)
    uploader = RecordingUploader()
    client = ScriptedClient({PNG_BYTES: 'ok {"cate":["A","Other thing"]}'})

    stats = _pipeline(client, uploader, offsets={"A": 2}).run(image_folder)

    assert [r.destination_path for r in uploader.records] == ["imgs/A/2.png", "imgs/Other_thing/0.png"]
    assert uploader.records[1].commit_message.endswith("to category Other thing")
    assert stats.category_counts == {"A": 1, "Other thing": 1}


def test_upload_failure_does_not_stop_siblings(image_folder):
    (image_folder / "pic.png").write_bytes(PNG_BYTES)

    class ExistsOnce(RecordingUploader):
        def upload(self, record):
            if "/A/" in record.destination_path:
                raise FileAlreadyExistsError("exists", status_code=422)
            super().upload(record)

    uploader = ExistsOnce()
    client = ScriptedClient({PNG_BYTES: '{"cate":["A","B"]}'})
    pipeline = _pipeline(client, uploader)
    stats = pipeline.run(image_folder)

    assert [r.destination_path for r in uploader.records] == ["imgs/B/0.png"]
    assert stats.upload_failed == 1
    assert pipeline.sequencer.peek("A") == 0


def test_skips_non_images_dirs_and_empty_results(image_folder):
    (image_folder / "sub").mkdir()
    (image_folder / "sub" / "nested.jpg").write_bytes(JPEG_BYTES)
    (image_folder / "notes.txt").write_text("hello")
    (image_folder / "blank.jpg").write_bytes(JPEG_BYTES)
    (image_folder / "broken.png").write_bytes(PNG_BYTES)

    client = ScriptedClient({
        JPEG_BYTES: "I don't know",
        PNG_BYTES: ModelGenerationError("Model error [500]"),
    })
    uploader = RecordingUploader()
    stats = _pipeline(client, uploader).run(image_folder)

    assert len(client.prompts) == 2
    assert uploader.records == []
    assert stats.images == 2
    assert stats.skipped == 1
    assert stats.failed == 1


def test_prompt_embeds_allowed_categories(image_folder):
    (image_folder / "a.jpg").write_bytes(JPEG_BYTES)
    client = ScriptedClient({JPEG_BYTES: '{"cate":["风景"]}'})
    _pipeline(client, RecordingUploader(), allowed=("风景", "美食")).run(image_folder)
    assert "风景,美食" in client.prompts[0]
    assert '{"cate":["美食","生活"]}' in client.prompts[0]


def test_dry_run_never_uploads(image_folder):
    (image_folder / "a.jpg").write_bytes(JPEG_BYTES)
    (image_folder / "b.png").write_bytes(PNG_BYTES)
    client = ScriptedClient({JPEG_BYTES: '{"cate":["A"]}', PNG_BYTES: '{"cate":["A"]}'})
    pipeline = _pipeline(client, None, offsets={"A": 1}, dry_run=True)

    stats = pipeline.run(image_folder)

    assert stats.uploaded == 0
    assert stats.category_counts == {"A": 2}
    assert pipeline.sequencer.peek("A") == 3


def test_uploader_required_without_dry_run():
    with pytest.raises(ValueError):
        _pipeline(ScriptedClient({}), None)
