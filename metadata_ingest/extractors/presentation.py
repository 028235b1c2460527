import re

from metadata_ingest.extractors.models import PresentationContent
from metadata_ingest.extractors.ooxml import open_archive, read_entry, text_runs
from metadata_ingest.logging.logger import Log

MAX_SLIDES = 20
MAX_BULLETS_PER_SLIDE = 5
MIN_BULLET_LENGTH = 6
MAX_BULLETS = 15

_SLIDE_ENTRY_RE = re.compile(r"^ppt/slides/slide(\d+)\.xml$")


class PresentationExtractor:
    """Extracts slide titles and bullet points from a PowerPoint (.pptx) package."""

    def extract(self, data: bytes) -> PresentationContent:
        """
        The first text run of each slide is its title; up to five following
        runs of at least six characters become bullet points.

        Raises:
            ExtractionError: if the bytes are not a readable archive.
        """
        with open_archive(data) as archive:
            slide_entries = self._slide_entries(archive.namelist())
            slide_xml = [read_entry(archive, name) for name in slide_entries[:MAX_SLIDES]]

        slide_titles: list[str] = []
        bullet_points: list[str] = []
        for xml in slide_xml:
            runs = [run.strip() for run in text_runs(xml, "a:t") if run.strip()]
            if not runs:
                continue
            slide_titles.append(runs[0])
            for run in runs[1 : 1 + MAX_BULLETS_PER_SLIDE]:
                if len(run) >= MIN_BULLET_LENGTH:
                    bullet_points.append(run)

        Log.info(
            f"Presentation: {len(slide_entries)} slides, {len(slide_titles)} titles, "
            f"{len(bullet_points)} bullet points"
        )
        return PresentationContent(
            slide_count=len(slide_entries),
            slide_titles=slide_titles,
            bullet_points=bullet_points[:MAX_BULLETS],
        )

    @staticmethod
    def _slide_entries(names: list[str]) -> list[str]:
        numbered: list[tuple[int, str]] = []
        for name in names:
            match = _SLIDE_ENTRY_RE.match(name)
            if match:
                numbered.append((int(match.group(1)), name))
        return [name for _, name in sorted(numbered)]
