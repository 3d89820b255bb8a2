"""
Pipeline orchestrator that runs a raw record through all six stages.

This module is the main interface of the engine: one raw playout record in,
one OutputBundle out. The pipeline holds no per-record state, so a single
instance can be shared between threads.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Mapping, Optional

from rdstext.models.schemas import (
    Degradation, NormalizationConfig, OutputBundle, PrefixEntry, ProcessingResult
)
from rdstext.pipeline.composer import OutputComposer
from rdstext.pipeline.dedup import DedupResolver
from rdstext.pipeline.normalizer import FieldNormalizer
from rdstext.pipeline.parser import FieldParser
from rdstext.pipeline.tail_stripper import TitleTailStripper
from rdstext.pipeline.truncator import HARD_CUT, AdaptiveTruncator
from rdstext.text.keys import has_alnum
from rdstext.text.prefixes import DEFAULT_LANGUAGE, DEFAULT_PREFIXES, lookup_prefix
from rdstext.text.regions import RegionCatalog

logger = logging.getLogger(__name__)

# Tail stripping and dedup can each expose work for the other
MAX_RESOLVE_ROUNDS = 3


class RdsTextPipeline:
    """
    Main pipeline for turning playout metadata into RDS strings.
    """

    def __init__(
        self,
        config: Optional[NormalizationConfig] = None,
        prefix_language: str = DEFAULT_LANGUAGE,
        prefix_catalog: Mapping[str, PrefixEntry] = DEFAULT_PREFIXES,
        region_catalog: Optional[RegionCatalog] = None
    ):
        """
        Initialize the pipeline.

        Args:
            config: Immutable normalization settings (defaults if omitted)
            prefix_language: Key into the prefix catalog
            prefix_catalog: Mapping of language code to PrefixEntry
            region_catalog: Region names/codes for artist suffix stripping
        """
        self.config = config or NormalizationConfig()
        self.prefix_language = prefix_language

        self.parser = FieldParser(self.config.delimiter)
        self.normalizer = FieldNormalizer(self.config)
        self.tail_stripper = TitleTailStripper()
        self.dedup = DedupResolver(region_catalog)
        self.truncator = AdaptiveTruncator(self.config.max_len, self.config.joiner)
        self.composer = OutputComposer(self.config, lookup_prefix(prefix_language, prefix_catalog))

    def process(self, raw: str) -> OutputBundle:
        """Convert one raw record; never raises."""
        return self.process_detailed(raw).bundle

    def process_detailed(self, raw: str) -> ProcessingResult:
        """
        Convert one raw record and report how it was handled.

        Args:
            raw: Raw "artist<delimiter>title" text

        Returns:
            ProcessingResult with the bundle, intermediate fields and any
            degradations. Unexpected errors are logged and yield an empty
            bundle.
        """
        start_time = time.time()
        result = ProcessingResult(raw=raw or "")

        try:
            self._run(result)
        except Exception as e:
            logger.error(f"Failed to process record {raw!r}: {e}")
            logger.debug("Pipeline failure details", exc_info=True)
            result.error = str(e)
            result.bundle = OutputBundle()

        result.processing_time_ms = (time.time() - start_time) * 1000
        for degradation in result.degradations:
            logger.info(f"Degraded ({degradation.value}): {raw!r}")
        return result

    def _run(self, result: ProcessingResult) -> None:
        # Stage 1: parse
        parsed = self.parser.parse(result.raw)
        result.parsed = parsed
        if parsed.ambiguous:
            result.degradations.append(Degradation.PARSE_AMBIGUOUS)
        if not parsed.is_valid:
            result.degradations.append(Degradation.INVALID_RECORD)
            return

        # Stage 2: normalize each field
        artist = self._normalize_field(parsed.artist, result)
        title = self._normalize_field(parsed.title, result)
        if not artist and not title:
            return

        # Stages 3 and 4: strip title tails and resolve duplicates until stable.
        # An artist emptied by filtering still makes this a two-field record.
        artist_present = bool(parsed.artist)
        for _ in range(MAX_RESOLVE_ROUNDS):
            before = (artist, title)
            title = self.tail_stripper.strip(title, artist_present=artist_present)
            artist, title = self.dedup.resolve(artist, title)
            if (artist, title) == before:
                break
        result.artist, result.title = artist, title

        # Stage 5: fit into the budget
        fitted = self.truncator.fit(artist, title)
        result.fitted = fitted
        if fitted.strategy == HARD_CUT:
            result.degradations.append(Degradation.BUDGET_EXHAUSTED)

        # Stage 6: compose outputs
        result.bundle = self.composer.compose(fitted)

    def _normalize_field(self, text: str, result: ProcessingResult) -> str:
        normalized = self.normalizer.normalize(text)
        if has_alnum(normalized):
            return normalized
        if has_alnum(text) and Degradation.EMPTY_AFTER_FILTER not in result.degradations:
            result.degradations.append(Degradation.EMPTY_AFTER_FILTER)
        return ""

    def process_many(self, records: Iterable[str], max_workers: int = 1) -> List[ProcessingResult]:
        """
        Convert many records, optionally on a thread pool.

        Results are returned in input order.
        """
        records = list(records)
        if max_workers > 1 and len(records) > 1:
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                return list(executor.map(self.process_detailed, records))
        return [self.process_detailed(record) for record in records]
