"""HTTP entrypoint for company searches and email drafts (Cloud Run friendly)."""

from __future__ import annotations

import logging
import os
from functools import wraps
from typing import Any, Callable, Dict

from flask import Flask, current_app, jsonify, request

from succession_leads.core.config import SEARCH_TERMS, ConfigError, get_settings
from succession_leads.core.email_drafts import EmailDraftGenerator, EmailGenerationError
from succession_leads.jobs.search_companies import (
    NoCompaniesFound,
    SearchAggregator,
    SearchFailed,
)

# ---------- Logging ----------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

# ---------- App ----------
app = Flask(__name__)
# Callable[[str], bool] supplied by the identity provider integration; None disables the gate.
app.config.setdefault("TOKEN_VERIFIER", None)


def require_bearer_token(view: Callable[..., Any]) -> Callable[..., Any]:
    @wraps(view)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        verifier = current_app.config.get("TOKEN_VERIFIER")
        if verifier is None:
            return view(*args, **kwargs)

        auth_header = request.headers.get("Authorization", "")
        if not auth_header.startswith("Bearer "):
            return jsonify({"error": "Unauthorized. Please log in."}), 401

        token = auth_header[len("Bearer "):].strip()
        try:
            accepted = bool(verifier(token))
        except Exception as exc:  # noqa: BLE001
            logger.warning("Token verification failed: %s", exc)
            accepted = False
        if not accepted:
            return jsonify({"error": "Unauthorized. Invalid or expired token."}), 401
        return view(*args, **kwargs)

    return wrapper


def _json_body() -> Dict[str, Any]:
    """Request JSON as a dict; missing, invalid or non-object bodies read as empty."""
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


# ---------- Routes ----------


@app.get("/")
def root() -> Any:
    """Simple root to avoid 404 on GET /"""
    return "ok", 200


@app.get("/healthz")
def healthcheck() -> Any:
    """Lightweight health endpoint; only reads settings."""
    settings = get_settings()
    return (
        jsonify(
            {
                "status": "ok",
                "registry_configured": bool(settings.companies_house_api_key),
                "email_configured": bool(settings.openai_api_key),
            }
        ),
        200,
    )


@app.get("/api/search-terms")
def search_terms() -> Any:
    return jsonify({"searchTerms": list(SEARCH_TERMS)}), 200


@app.post("/api/search")
@require_bearer_token
def search() -> Any:
    """
    Run a company search.
    Required JSON fields: search_term
    """
    payload = _json_body()
    term = str(payload.get("search_term") or "").strip()
    if not term:
        return jsonify({"error": "Please enter a search term"}), 400

    try:
        # One aggregator per request; runs share no state.
        aggregator = SearchAggregator.from_settings(get_settings())
        response = aggregator.search(term)
    except ConfigError as exc:
        logger.error("Search rejected: %s", exc)
        return jsonify({"error": "API key not configured"}), 500
    except NoCompaniesFound as exc:
        return jsonify({"error": str(exc)}), 404
    except SearchFailed as exc:
        return jsonify({"error": str(exc)}), 500

    return jsonify(response.to_dict()), 200


@app.post("/api/generate-email")
@require_bearer_token
def generate_email() -> Any:
    """
    Draft a recruitment email for a director.
    Required JSON fields: companyName
    Optional: companyNumber, directorName, directorAge, address, customInstructions
    """
    payload = _json_body()
    company_name = str(payload.get("companyName") or "").strip()
    if not company_name:
        return jsonify({"error": "Company name is required"}), 400

    try:
        generator = EmailDraftGenerator.from_settings(get_settings())
    except ConfigError as exc:
        return jsonify({"error": str(exc)}), 503

    try:
        draft = generator.generate(
            company_name,
            company_number=payload.get("companyNumber"),
            director_name=payload.get("directorName"),
            director_age=payload.get("directorAge"),
            address=payload.get("address"),
            custom_instructions=payload.get("customInstructions"),
        )
    except EmailGenerationError as exc:
        return jsonify({"error": "Failed to generate email", "details": str(exc)}), 500

    return jsonify(draft.to_dict()), 200


def main() -> None:
    """Bind on PORT when the platform injects it, otherwise on WORKER_PORT."""
    env_port = os.getenv("PORT")
    logger.info("[BOOT] ENV PORT=%s", env_port)

    port = int(env_port or get_settings().worker_port)
    logger.info("[BOOT] Binding on 0.0.0.0:%d", port)
    app.run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
