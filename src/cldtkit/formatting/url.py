#!/usr/bin/env python3
"""
CLDTKIT URL DECOMPOSER
----------------------
Splits a single-line delivery URL of the form

    scheme://domain/cloud-name/resource-type/resource-kind/segment[/segment...]

into its prefix, the ordered transformation segments, an optional
v<digits> version and the trailing public-id path.

Author: CldtKit Team
Date: 2026-10-17
"""

import re
import logging
from typing import List, Optional

from cldtkit.core.models import DecomposedUrl
from cldtkit.formatting.lexer import VERSION_PATTERN, is_transformation_component

logger = logging.getLogger("cldtkit.url")


class UrlDecomposer:
    """
    Finds the boundary between the transformation pipeline and the
    public-id. The bias is towards the pipeline side: with a version
    present, every segment before it is a transformation.
    """

    # Group 1: scheme, 2: domain, 3: cloud name, 4: resource type,
    # 5: resource kind, 6: everything after
    URL_PATTERN = re.compile(r'^(https?)://([^/]+)/([^/]+)/([^/]+)/([^/]+)/(.+)$')

    def decompose(self, text: str) -> Optional[DecomposedUrl]:
        """Returns None when the text is not a delivery URL."""
        match = self.URL_PATTERN.match(text.strip())
        if not match:
            logger.debug("Not a delivery URL, leaving untouched")
            return None

        scheme, domain, cloud_name, resource_type, resource_kind, rest = match.groups()
        prefix = f"{scheme}://{domain}/{cloud_name}/{resource_type}/{resource_kind}/"
        components = rest.split("/")

        version_index = self._find_version(components)
        if version_index != -1:
            return DecomposedUrl(
                prefix=prefix,
                transformations=components[:version_index],
                version=components[version_index],
                public_id=components[version_index + 1:],
            )

        public_start = self._find_public_id_start(components)
        return DecomposedUrl(
            prefix=prefix,
            transformations=components[:public_start],
            public_id=components[public_start:],
        )

    def _find_version(self, components: List[str]) -> int:
        for i, comp in enumerate(components):
            if VERSION_PATTERN.match(comp):
                return i
        return -1

    def _find_public_id_start(self, components: List[str]) -> int:
        """
        Scans backwards for the last transformation-like segment; the
        public-id starts right after it. At least one segment is always
        left for the public-id.
        """
        for i in range(len(components) - 1, -1, -1):
            if is_transformation_component(components[i]):
                return min(i + 1, len(components) - 1)
        return 0
