# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Core GIFMetadata class

This module provides the main API for reading text metadata from GIF
files: comments, application extensions and plain text blocks. The file
is streamed through GIFStreamParser, so only one chunk is held in memory
at a time.

Copyright 2025 DNAi inc.
"""

from contextlib import closing
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from gifmetadata.config import ParserConfig
from gifmetadata.events import ExtensionEvent, ExtensionKind, ParseResult, ParseWarning
from gifmetadata.exceptions import MetadataReadError
from gifmetadata.formatting import display_text
from gifmetadata.parser import GIFStreamParser
from gifmetadata.sources import iter_bytes_chunks, iter_file_chunks


@dataclass
class ApplicationExtension:
    """An application extension and the sub-blocks that followed it."""
    identifier: bytes
    sub_blocks: List[bytes] = field(default_factory=list)

    @property
    def name(self) -> str:
        """Identifier (first 8 bytes) and auth code (last 3) as text."""
        return display_text(self.identifier)


@dataclass
class ExtractionResult:
    """Everything extracted from one GIF file."""
    parse: ParseResult
    extensions: List[ExtensionEvent]
    file_path: Optional[Path] = None
    file_size: Optional[int] = None

    @property
    def warnings(self) -> List[ParseWarning]:
        return self.parse.warnings

    @property
    def comments(self) -> List[bytes]:
        return [e.text for e in self.extensions if e.kind == ExtensionKind.COMMENT]

    @property
    def plain_text(self) -> List[bytes]:
        return [e.text for e in self.extensions if e.kind == ExtensionKind.PLAIN_TEXT]

    @property
    def applications(self) -> List[ApplicationExtension]:
        """Application extensions with their sub-blocks grouped together."""
        applications: List[ApplicationExtension] = []
        for event in self.extensions:
            if event.kind == ExtensionKind.APPLICATION:
                applications.append(ApplicationExtension(event.text))
            elif event.kind == ExtensionKind.APPLICATION_SUBBLOCK and applications:
                applications[-1].sub_blocks.append(event.text)
        return applications


def _single_or_list(values: List[str]) -> Union[str, List[str]]:
    return values[0] if len(values) == 1 else values


class GIFMetadata:
    """
    Reader for GIF text metadata.

    Example:
        >>> with GIFMetadata('image.gif') as gif:
        ...     for comment in gif.read().comments:
        ...         print(comment)
    """

    def __init__(
        self,
        file_path: Optional[Union[str, Path]] = None,
        file_data: Optional[bytes] = None,
        config: Optional[ParserConfig] = None
    ):
        """
        Initialize the reader.

        Args:
            file_path: Path to a GIF file
            file_data: GIF bytes already in memory; used instead of file_path
            config: Parser configuration
        """
        if file_path is None and file_data is None:
            raise ValueError("Either file_path or file_data must be provided")
        self.file_path = Path(file_path) if file_path is not None else None
        self.file_data = file_data
        self.config = config or ParserConfig()
        self._result: Optional[ExtractionResult] = None

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self._result = None

    def read(self) -> ExtractionResult:
        """
        Parse the GIF and collect its extension events.

        Returns:
            ExtractionResult; the parse runs once and is cached

        Raises:
            MetadataReadError: If the file cannot be read, or does not
                carry a complete GIF signature
        """
        if self._result is None:
            self._result = self._extract()
        return self._result

    def _extract(self) -> ExtractionResult:
        chunk_size = self.config.chunk_size
        if self.file_data is not None:
            chunks = iter_bytes_chunks(self.file_data, chunk_size)
            file_size = len(self.file_data)
        else:
            if not self.file_path.is_file():
                raise MetadataReadError(f"file '{self.file_path}' cannot be accessed")
            file_size = self.file_path.stat().st_size
            chunks = iter_file_chunks(self.file_path, chunk_size)

        parser = GIFStreamParser(self.config)
        extensions: List[ExtensionEvent] = []
        try:
            with closing(chunks):
                for chunk in chunks:
                    for event in parser.feed(chunk):
                        if isinstance(event, ExtensionEvent):
                            extensions.append(event)
                    if parser.stopped:
                        break
        except OSError as exc:
            raise MetadataReadError(f"Failed to read GIF file: {exc}") from exc

        return ExtractionResult(
            parse=parser.close(),
            extensions=extensions,
            file_path=self.file_path,
            file_size=file_size,
        )

    def get_all_metadata(self) -> Dict[str, Any]:
        """
        Get extracted metadata as a flat dictionary of ``GIF:`` tags.

        Returns:
            Dictionary of tag names to values
        """
        result = self.read()
        parse = result.parse
        metadata: Dict[str, Any] = {}

        if result.file_size is not None:
            metadata['File:FileSize'] = result.file_size
        if parse.version is not None:
            metadata['GIF:GIFVersion'] = parse.version
        if parse.canvas_width is not None:
            metadata['GIF:ImageWidth'] = parse.canvas_width
        if parse.canvas_height is not None:
            metadata['GIF:ImageHeight'] = parse.canvas_height
        metadata['GIF:FrameCount'] = parse.image_count
        metadata['GIF:TrailerFound'] = 'Yes' if parse.saw_trailer else 'No'

        comments = [display_text(text) for text in result.comments]
        if comments:
            metadata['GIF:Comment'] = _single_or_list(comments)

        plain_text = [display_text(text) for text in result.plain_text]
        if plain_text:
            metadata['GIF:PlainText'] = _single_or_list(plain_text)

        applications = result.applications
        if applications:
            metadata['GIF:ApplicationExtension'] = _single_or_list([a.name for a in applications])
            for application in applications:
                data = b''.join(application.sub_blocks)
                metadata[f'GIF:ApplicationExtension:{application.name}'] = data.hex().upper()

        if parse.warnings:
            metadata['GIF:Warning'] = _single_or_list([w.message for w in parse.warnings])

        return metadata
