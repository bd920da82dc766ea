"""
Expansion of a claim template into the claims of one token.

A string claim that expands to nothing is left out of the claims entirely,
and a nested claim whose children were all left out is dropped as well. An
unresolved placeholder therefore means "absent", never "empty string".
Scalars are always copied.
"""

import logging
from typing import Any, Dict

from jwt_signer.replacer import SubstitutionContext
from jwt_signer.template import ClaimTemplate, NestedNode, ScalarLeaf, StringLeaf

logger = logging.getLogger(__name__)


def expand_claims(template: ClaimTemplate, ctx: SubstitutionContext) -> Dict[str, Any]:
    """
    Expand ``template`` against ``ctx``.

    Returns:
        Dict[str, Any]: A fresh claims dictionary, possibly empty
    """
    claims: Dict[str, Any] = {}

    for key, node in template.children.items():
        if isinstance(node, StringLeaf):
            value = ctx.expand(node.template)
            logger.debug(
                "String key expanded",
                extra={"key": key, "value": value, "value_config": node.template},
            )
            if value != "":
                claims[key] = value
        elif isinstance(node, NestedNode):
            logger.debug("Descending into nested map", extra={"key": key})
            nested = expand_claims(node, ctx)
            if nested:
                claims[key] = nested
        elif isinstance(node, ScalarLeaf):
            logger.debug(
                "Set value of non-string type",
                extra={"key": key, "type": type(node.value).__name__},
            )
            claims[key] = node.value
        else:
            raise TypeError(f"unexpected claim node {node!r}")

    logger.debug("Finalize current map", extra={"length": len(claims)})
    return claims
