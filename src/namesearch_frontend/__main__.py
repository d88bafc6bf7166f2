from __future__ import annotations
import argparse, json, sys
from namesearch import DecodeError
from . import create_engine

def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Search names in a PDF with a garbled text layer")
    p.add_argument("--pdf", default=None, help="PDF to search")
    p.add_argument("--mappings", default=None, help='Mapping store DSN ("json:///path", "sqlite:///path", "memory://")')
    p.add_argument("--q", default=None, help="Single query to run once")
    p.add_argument("--repl", action="store_true", help="Interactive loop after init")
    p.add_argument("--teach", nargs=2, metavar=("GARBLED", "CORRECT"), help="Teach a correction")
    p.add_argument("--remove", metavar="GARBLED", help="Remove a taught correction")
    p.add_argument("--suggest", metavar="TEXT", help="Suggest which row TEXT is a garbled form of")
    p.add_argument("--list-mappings", action="store_true", help="Print the mapping table")
    p.add_argument("--no-seed-fixes", action="store_true", help="Disable the built-in garble fixes")
    p.add_argument("--json", action="store_true", help="Emit JSON rows")
    p.add_argument("--serve", action="store_true", help="Run the Flask UI after init")
    p.add_argument("--host", default="127.0.0.1")
    p.add_argument("--port", type=int, default=8000)
    p.add_argument("--verbose", action="store_true")

    args = p.parse_args(argv)

    try:
        eng = create_engine(args.mappings, pdf=args.pdf, verbose=args.verbose,
                            use_seed_fixes=not args.no_seed_fixes)
    except DecodeError as exc:
        print(f"Error reading PDF: {exc.message}", file=sys.stderr)
        return 2

    try:
        if args.teach:
            ok = eng.teach(*args.teach)
            print("taught" if ok else "ignored (empty garbled or correct text)")
        if args.remove:
            print("removed" if eng.remove_mapping(args.remove) else "no such mapping")
        if args.list_mappings:
            for g, c in sorted(eng.mappings.mapping.items()):
                print(f"{g}\t{c}")

        if args.suggest:
            s = eng.suggest_mapping(args.suggest)
            if args.json:
                print(json.dumps(s.to_dict() if s else None, ensure_ascii=False, indent=2))
            elif s is None:
                print("(no confident suggestion)")
            else:
                print(f"page {s.page}: {s.garbled!r} -> {s.correct!r} (similarity {s.similarity:.2f})")

        def run_query(q: str):
            rows = eng.set_query(q)
            if args.json:
                print(json.dumps({"stage": eng.last_stage.value, "results": [r.to_dict() for r in rows]},
                                 ensure_ascii=False, indent=2))
                return
            if not rows:
                print("(no matches)"); return
            print(f"[{eng.last_stage.value}] {len(rows)} match(es)")
            print("#  Page  Text")
            for i, r in enumerate(rows, 1):
                print(f"{i:<2} {r.page:<5} {r.mapped_text}")

        if args.q:
            run_query(args.q)

        if args.repl:
            print(f"Rows indexed: {eng.row_count}. Type a name (empty line to exit).")
            while True:
                try:
                    q = input("> ").strip()
                except (EOFError, KeyboardInterrupt):
                    break
                if not q:
                    break
                run_query(q)

        if args.serve:
            from .web import serve
            serve(eng, host=args.host, port=args.port, debug=args.verbose)

        return 0
    finally:
        eng.shutdown()

if __name__ == "__main__":
    raise SystemExit(main())
