import json
import logging
from typing import Optional

import anthropic

from . import config
from .config import ANTHROPIC_API_KEY, ANTHROPIC_MAX_TOKENS, ANTHROPIC_MODEL
from .errors import AIAnalysisError
from .models import AnalysisResult, ProductAnalysis, ProductListing
from .pricing import parse_rating, parse_review_count
from .profiles import ProfileStore
from .scoring import EMPTY_RESULT_MESSAGE, analyze_shopping_results

logger = logging.getLogger(__name__)


def _get_client():
    return anthropic.Anthropic(api_key=ANTHROPIC_API_KEY)


def _build_analysis_prompt(query: str, listings: list[ProductListing]) -> str:
    product_data = []
    for p in listings:
        raw = p.raw or {}
        product_data.append(
            {
                "product_id": p.product_id,
                "title": p.title,
                "price": p.price,
                "rating": parse_rating(p.rating) or None,
                "reviews": parse_review_count(p.reviews) or None,
                "extensions": raw.get("extensions"),
                "source": raw.get("source"),
            }
        )

    prompt = f"""Eres un analista técnico senior de productos con experiencia en electrónica de consumo.
Tu tarea es tomar la decisión de compra a partir de resultados de búsqueda de un comparador de precios.

## Búsqueda del usuario
"{query}"

## Resultados ({len(listings)} productos)
{json.dumps(product_data, ensure_ascii=False, indent=1)}

## Proceso de análisis
1. Agrupa los modelos o variantes repetidas para compararlos de forma justa.
2. Compara especificaciones técnicas (capacidad, potencia, versión, material) y busca los diferenciadores clave.
3. Valida la calidad con la valoración y el volumen de reseñas. Un producto sin reseñas es una alerta y va en contras.
4. Elige las {config.TOP_N} mejores opciones distintas, ordenadas de mejor a peor.
5. Decide cuál de ellas comprarías tú. Debe ser la primera de la lista.
6. Ignora vendedor, costo de envío y disponibilidad.

## Formato de respuesta
Devuelve EXCLUSIVAMENTE un objeto JSON válido, sin texto adicional:

{{
  "productos_analisis": [
    {{
      "product_id": "usar exactamente el product_id del resultado original",
      "pros": ["ventaja técnica 1", "ventaja técnica 2"],
      "contras": ["limitación técnica", "duda por falta de reseñas"]
    }}
  ],
  "recomendacion_final": "Según mi análisis, yo compraría [producto] debido a que [justificación técnica concisa]."
}}"""
    return prompt


def _sanitize_response(response_text: str) -> str:
    content = response_text.replace("```json", "").replace("```", "")
    first = content.find("{")
    last = content.rfind("}")
    if first != -1 and last > first:
        content = content[first : last + 1]
    return content.strip()


def _parse_analysis_response(
    response_text: str, known_ids: Optional[set[str]] = None
) -> AnalysisResult:
    """
    Normalize the model answer into an AnalysisResult.

    Unknown and repeated product ids are dropped before the first remaining
    item is marked as the recommendation.
    """
    try:
        data = json.loads(_sanitize_response(response_text))
    except json.JSONDecodeError as e:
        raise AIAnalysisError(f"AI response is not valid JSON: {e}") from e

    items = data.get("productos_analisis") if isinstance(data, dict) else None
    if not isinstance(items, list):
        raise AIAnalysisError("AI response has no productos_analisis list")

    productos = []
    seen = set()
    for item in items:
        if not isinstance(item, dict) or not item.get("product_id"):
            continue
        product_id = str(item["product_id"])
        if known_ids is not None and product_id not in known_ids:
            logger.warning("AI answer names an unknown product: %s", product_id)
            continue
        if product_id in seen:
            continue
        seen.add(product_id)
        productos.append(
            ProductAnalysis(
                product_id=product_id,
                pros=[str(p) for p in item.get("pros") or []],
                contras=[str(c) for c in item.get("contras") or []],
                is_recommended=not productos,
            )
        )
        if len(productos) >= config.TOP_N:
            break

    return AnalysisResult(
        productos_analisis=productos,
        recomendacion_final=str(data.get("recomendacion_final") or ""),
    )


def analyze_with_ai(
    query: str,
    listings: list[ProductListing],
    category: Optional[str] = None,
    profiles: Optional[ProfileStore] = None,
) -> AnalysisResult:
    """Ask Claude for the recommendation, or use the local rule engine without an API key."""
    if not listings:
        return AnalysisResult(productos_analisis=[], recomendacion_final=EMPTY_RESULT_MESSAGE)

    if not ANTHROPIC_API_KEY:
        logger.info("ANTHROPIC_API_KEY not set, using local analysis")
        return analyze_shopping_results(
            query, listings, category=category, profiles=profiles
        )

    client = _get_client()
    prompt = _build_analysis_prompt(query, listings)

    logger.info("Requesting AI analysis for %r (%d products)", query, len(listings))
    try:
        response = client.messages.create(
            model=ANTHROPIC_MODEL,
            max_tokens=ANTHROPIC_MAX_TOKENS,
            messages=[{"role": "user", "content": prompt}],
        )
    except anthropic.APIError as e:
        logger.error("AI analysis request failed: %s", e)
        raise AIAnalysisError("No se pudo obtener una respuesta del servicio de IA.") from e

    texts = [
        block.text for block in response.content or []
        if getattr(block, "type", None) == "text"
    ]
    if not texts:
        raise AIAnalysisError("AI response has no text content")

    known_ids = {p.product_id for p in listings if p.product_id}
    return _parse_analysis_response("".join(texts), known_ids)
