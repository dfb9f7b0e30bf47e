"""
recipe_ai_core.cli
==================

Punto de entrada mínimo para extraer una receta de un archivo local.

Uso
---
    python -m recipe_ai_core.cli foto_receta.jpg
    python -m recipe_ai_core.cli libro.pdf --mime application/pdf -o receta.json
    python -m recipe_ai_core.cli foto_receta.jpg --save --user ana

Sin `--save` no toca la base de datos (no usa cache). Con `--save` la receta
se guarda para el usuario indicado en `DATABASE_URL`; si ese archivo ya estaba
guardado se devuelve la receta existente sin llamar al modelo.

Pensado para:
- smoke tests manuales contra OpenAI,
- validar que el pipeline "no se rompió" al tocar prompts/normalizer,
- cargar recetas desde la terminal.
"""

from __future__ import annotations

import argparse
import json
import logging
import mimetypes
import sys
from pathlib import Path

from .db.database import get_db_session, init_db
from .db.store import SqlRecipeStore
from .domain_models import Recipe
from .engine import extract_recipe, run_scan_pipeline
from .errors import RecipeExtractionError
from .fingerprint import hash_file
from .media import detect_mime_type

DEFAULT_CLI_USER = "cli"


def _guess_mime(path: Path) -> str | None:
    return detect_mime_type(path.name) or mimetypes.guess_type(path.name)[0]


def _scan_and_save(content: bytes, mime_type: str, user_id: str) -> Recipe:
    init_db()
    with get_db_session() as session:
        store = SqlRecipeStore(session, user_id)
        result = run_scan_pipeline(content, mime_type, store=store)
        if result["cached"]:
            print(f"♻️  Ya estaba guardada para {user_id}, no se llamó al modelo", file=sys.stderr)
            return result["recipe"]

        saved = store.create(result["recipe"], fingerprint=result["fingerprint"])
        print(f"💾 Receta guardada en la base para {user_id}", file=sys.stderr)
        return saved


def main(argv: list[str] | None = None) -> int:
    """
    Ejecuta la extracción de una receta e imprime el JSON resultante.

    Returns
    -------
    int
        0 si salió bien, 1 si falló la extracción, 2 si el archivo no existe.
    """
    parser = argparse.ArgumentParser(description="Extraer una receta de una imagen o PDF")
    parser.add_argument("file", help="Ruta a la imagen o PDF")
    parser.add_argument("--mime", default=None, help="MIME del archivo (default: por extensión)")
    parser.add_argument("-o", "--output", default=None, help="Guardar el JSON en este archivo")
    parser.add_argument("--save", action="store_true", help="Persistir la receta en DATABASE_URL")
    parser.add_argument(
        "--user",
        default=DEFAULT_CLI_USER,
        help=f"Dueño de la receta al usar --save (default: {DEFAULT_CLI_USER})",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Logging DEBUG")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    path = Path(args.file)
    if not path.is_file():
        print(f"❌ No existe el archivo: {path}", file=sys.stderr)
        return 2

    mime_type = args.mime or _guess_mime(path)
    print(f"📄 {path.name} ({mime_type or 'MIME desconocido'}) sha256={hash_file(path)}", file=sys.stderr)

    try:
        if args.save:
            recipe = _scan_and_save(path.read_bytes(), mime_type or "", args.user)
        else:
            recipe = extract_recipe(path.read_bytes(), mime_type or "")
    except RecipeExtractionError as e:
        print(f"❌ {e.kind}: {e.upstream_message}", file=sys.stderr)
        return 1

    output = json.dumps(recipe.to_dict(), ensure_ascii=False, indent=2)
    if args.output:
        Path(args.output).write_text(output, encoding="utf-8")
        print(f"✅ Receta guardada en {args.output}", file=sys.stderr)
    else:
        print(output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
