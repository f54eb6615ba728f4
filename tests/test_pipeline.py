from agv_rebrand.pipeline.orchestrator import run_rebrand_pipeline


class BytesFetcher:
    def __init__(self, payload: bytes):
        self.payload = payload

    def fetch_source_image(self, dni: str) -> bytes:
        return self.payload


class EmptyRecognizer:
    def recognize(self, image_bytes: bytes) -> str:
        return ""


def test_pipeline_runs_every_stage_in_order(public_dir, to_png, noise_cell_image):
    stages = []

    summary = run_rebrand_pipeline(
        "10001088",
        fetcher=BytesFetcher(to_png(noise_cell_image)),
        recognizer=EmptyRecognizer(),
        on_progress=lambda stage, progress, detail: stages.append(stage),
    )

    assert stages == ["fetch", "ocr", "scan", "render", "persist", "completed"]
    assert summary.candidate_count == 1
    assert summary.thumbnails_placed == 1
    assert summary.ocr_text == ""
    assert summary.logo_placed is False
    assert summary.filename.startswith("agv_rebrand_10001088_")
    assert (public_dir / summary.filename).read_bytes()[:4] == b"\x89PNG"


def test_output_names_are_unique(public_dir, to_png, noise_cell_image):
    fetcher = BytesFetcher(to_png(noise_cell_image))

    first = run_rebrand_pipeline("10001088", fetcher=fetcher, recognizer=EmptyRecognizer())
    second = run_rebrand_pipeline("10001088", fetcher=fetcher, recognizer=EmptyRecognizer())

    assert first.filename != second.filename
