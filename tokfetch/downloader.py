"""
Core download orchestrator.
Runs the extraction strategies one after another until one yields a result,
and records the outcome of every request.
"""
import logging

from tokfetch.errors import DownloadError, ExtractionError
from tokfetch.platform_handler import validate_page_url


class Downloader:
    """
    Sequences the extraction strategies for a single page link.
    Strategies never run concurrently for the same request.
    """

    def __init__(self, extractors, stats, settings):
        self.extractors = list(extractors)
        self.stats = stats
        self.language = settings['general']['language']
        self.domain_markers = settings['general']['domain_markers']

    def download(self, page_url):
        """
        Returns a MediaResult tagged with the method that produced it.
        Raises ValidationError for bad links and DownloadError when every
        strategy fails.
        """
        validate_page_url(page_url, self.domain_markers, self.language)
        logging.info(f"Attempting to download: {page_url}")

        for extractor in self.extractors:
            logging.info(f"Method {extractor.method}: {extractor.__class__.__name__}")
            try:
                result = extractor.extract(page_url)
            except ExtractionError as e:
                logging.warning(f"{extractor.method} extraction failed: {e.message}")
                continue
            except Exception as e:
                logging.exception(f"{extractor.method} extraction crashed: {e}")
                continue

            self.stats.record_success(extractor.method)
            result.method = extractor.method
            logging.info(f"Success with {extractor.method} for {page_url}")
            return result

        self.stats.record_failure()
        logging.error(f"All methods failed for {page_url}")
        raise DownloadError(self.language)
