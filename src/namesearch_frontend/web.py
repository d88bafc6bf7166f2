from __future__ import annotations
import argparse
from flask import Flask, request, jsonify, Response
from namesearch import DecodeError, Engine
from namesearch.models import maybe_dict

app = Flask(__name__)
_engine: Engine | None = None

def _eng() -> Engine:
    if _engine is None:
        raise RuntimeError("Engine not initialized. Call main() or set web._engine first.")
    return _engine

# ---------- API ----------
@app.get("/health")
def health():
    return jsonify({"ok": _engine is not None})

@app.get("/api/state")
def api_state():
    return jsonify(_eng().state())

@app.post("/api/document")
def api_document():
    f = request.files.get("file")
    data = f.read() if f is not None else request.get_data()
    eng = _eng()
    try:
        n = eng.load_document(data)
    except DecodeError as exc:
        return jsonify({"error": exc.message}), 400
    except RuntimeError as exc:
        return jsonify({"error": str(exc)}), 409
    return jsonify({"row_count": n})

@app.get("/api/search")
def api_search():
    q = request.args.get("q", "", type=str)
    eng = _eng()
    rows = eng.set_query(q)
    return jsonify({
        "query": q,
        "stage": eng.last_stage.value,
        "results": [r.to_dict() for r in rows],
    })

@app.get("/api/mappings")
def api_mappings():
    return jsonify(_eng().mappings.mapping)

@app.post("/api/mappings")
def api_teach():
    body = request.get_json(silent=True) or {}
    ok = _eng().teach(body.get("garbled", ""), body.get("correct", ""))
    return jsonify({"ok": ok, "mappings": _eng().mappings.mapping})

@app.delete("/api/mappings")
def api_remove():
    body = request.get_json(silent=True) or {}
    garbled = body.get("garbled") or request.args.get("garbled", "", type=str)
    ok = _eng().remove_mapping(garbled)
    return jsonify({"ok": ok, "mappings": _eng().mappings.mapping})

@app.get("/api/mappings/export")
def api_export():
    return Response(_eng().export_mappings(), mimetype="application/json")

@app.post("/api/mappings/import")
def api_import():
    try:
        n = _eng().import_mappings(request.get_data(as_text=True))
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400
    return jsonify({"imported": n, "mappings": _eng().mappings.mapping})

@app.get("/api/suggest")
def api_suggest():
    text = request.args.get("text", "", type=str)
    return jsonify({"suggestion": maybe_dict(_eng().suggest_mapping(text))})

# ---------- UI ----------
@app.get("/")
def home():
    # A tiny SPA: CSS variables + minimal JS, no external deps.
    html = r"""
<!doctype html>
<html lang="hi">
<head>
<meta charset="utf-8" />
<meta name="viewport" content="width=device-width,initial-scale=1" />
<title>PDF Name Search</title>
<style>
:root{
  --bg:#0b0f14;
  --panel:#0f141b;
  --ink:#cfd8e3;
  --muted:#8a94a6;
  --accent:#6ee7ff;
  --accent-2:#22d3ee;
  --border:#1c2530;
  --danger:#ff5d5d;
  --ok:#45d483;
}
*{box-sizing:border-box}
body{
  margin:0; background:var(--bg); color:var(--ink);
  font:16px/1.5 system-ui,-apple-system,Segoe UI,Roboto,"Noto Sans Devanagari",Arial;
}
.container{ max-width:980px; margin:24px auto; padding:0 16px }
.card{
  background:var(--panel); border:1px solid var(--border);
  border-radius:16px; padding:18px; margin-bottom:16px;
}
h1{ font-size:20px; margin:0 0 8px 0 }
h2{ font-size:16px; margin:0 0 8px 0; color:var(--muted) }
.controls{ display:flex; gap:12px; align-items:center; margin:12px 0 4px 0; flex-wrap:wrap }
input[type=text]{
  flex:1; min-width:200px; padding:10px 12px; border-radius:12px; border:1px solid var(--border);
  background:#0b1117; color:var(--ink); outline:none; font-size:16px;
}
input[type=text]:focus{ border-color:var(--accent) }
.btn{
  padding:10px 14px; border-radius:10px; border:1px solid var(--border);
  background:#0b1117; color:var(--ink); cursor:pointer;
}
.btn:hover{ border-color:var(--accent-2) }
.meta{ display:flex; justify-content:space-between; color:var(--muted); font-size:13px; margin-top:6px }
.err{
  display:none; margin-top:12px; padding:10px 12px; border-radius:10px;
  background:rgba(255,93,93,.12); border:1px solid rgba(255,93,93,.35); color:#ffb0b0;
}
.row{
  display:grid; grid-template-columns:5rem 1fr; gap:10px;
  padding:10px 12px; border-top:1px solid var(--border);
}
.row:first-child{ border-top:none }
.small{ color:var(--muted); font-variant-numeric:tabular-nums }
.empty{ padding:18px; text-align:center; color:var(--muted) }
</style>
</head>
<body>
  <div class="container">
    <div class="card">
      <h1>PDF Name Search</h1>
      <div class="controls">
        <input id="file" type="file" accept="application/pdf" />
        <div id="loading" class="small"></div>
      </div>
      <div class="controls">
        <input id="q" type="text" placeholder="Type a name like प्रेमबाई or जयराम" autocomplete="off" />
      </div>
      <div class="meta">
        <div id="stats">Rows indexed: 0</div>
        <div id="stage"></div>
      </div>
      <div id="err" class="err"></div>
    </div>

    <div class="card">
      <h2>Results</h2>
      <div id="out" class="empty">No matches</div>
    </div>

    <div class="card">
      <h2>Teach a correction</h2>
      <div class="controls">
        <input id="garbled" type="text" placeholder="Garbled text from the PDF" />
        <input id="correct" type="text" placeholder="Correct text" />
        <button id="teach" class="btn">Teach</button>
        <button id="suggest" class="btn">Suggest</button>
      </div>
      <div id="sugg" class="small"></div>
      <div id="maps"></div>
    </div>
  </div>

<script>
const $ = (s) => document.querySelector(s);
const esc = (s) => String(s).replace(/[&<>"]/g, (c) => ({"&":"&amp;","<":"&lt;",">":"&gt;",'"':"&quot;"}[c]));
let t;

function showErr(msg){ const e = $("#err"); e.textContent = msg; e.style.display = msg ? "block" : "none"; }

async function refreshState(){
  const st = await (await fetch("/api/state")).json();
  $("#stats").textContent = `Rows indexed: ${st.row_count}`;
  renderMappings(st.mappings);
}

function renderMappings(m){
  const keys = Object.keys(m);
  $("#maps").innerHTML = keys.length ? keys.map((k) =>
    `<div class="row"><button class="btn" data-k="${esc(k)}">Remove</button><div>${esc(k)} → ${esc(m[k])}</div></div>`
  ).join("") : `<div class="empty">No mappings taught yet.</div>`;
  document.querySelectorAll("#maps button").forEach((b) => b.addEventListener("click", async () => {
    await fetch("/api/mappings", {method:"DELETE", headers:{"Content-Type":"application/json"},
      body: JSON.stringify({garbled: b.dataset.k})});
    await refreshState(); search();
  }));
}

async function search(){
  const q = $("#q").value.trim();
  if(!q){ $("#out").className = "empty"; $("#out").textContent = "No matches"; $("#stage").textContent = ""; return; }
  const data = await (await fetch(`/api/search?q=${encodeURIComponent(q)}`)).json();
  $("#stage").textContent = `Stage: ${data.stage}`;
  if(!data.results.length){ $("#out").className = "empty"; $("#out").textContent = "No matches"; return; }
  $("#out").className = "";
  $("#out").innerHTML = data.results.map((r) =>
    `<div class="row"><div class="small">Page ${r.page}</div><div title="${esc(r.raw_text)}">${esc(r.mapped_text)}</div></div>`
  ).join("");
}

$("#file").addEventListener("change", async (ev) => {
  const f = ev.target.files[0];
  if(!f) return;
  $("#loading").textContent = "Extracting...";
  showErr("");
  const fd = new FormData(); fd.append("file", f);
  try{
    const resp = await fetch("/api/document", {method:"POST", body: fd});
    const data = await resp.json();
    if(!resp.ok) showErr(`Error reading PDF: ${data.error}`);
  }finally{
    $("#loading").textContent = "";
    await refreshState(); search();
  }
});

$("#q").addEventListener("input", () => { clearTimeout(t); t = setTimeout(search, 150); });

$("#teach").addEventListener("click", async () => {
  await fetch("/api/mappings", {method:"POST", headers:{"Content-Type":"application/json"},
    body: JSON.stringify({garbled: $("#garbled").value, correct: $("#correct").value})});
  await refreshState(); search();
});

$("#suggest").addEventListener("click", async () => {
  const text = $("#correct").value.trim();
  if(!text) return;
  const data = await (await fetch(`/api/suggest?text=${encodeURIComponent(text)}`)).json();
  const s = data.suggestion;
  if(!s){ $("#sugg").textContent = "No confident suggestion."; return; }
  $("#garbled").value = s.garbled;
  $("#sugg").textContent = `Page ${s.page}: "${s.garbled}" looks like "${s.correct}" (${Math.round(s.similarity*100)}%). Press Teach to accept.`;
});

refreshState();
</script>
</body>
</html>
"""
    return Response(html, mimetype="text/html")

def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Run Flask UI on top of Engine")
    ap.add_argument("--pdf", default=None, help="PDF to load at startup")
    ap.add_argument("--mappings", default=None, help='DSN: "json:///path", "sqlite:///path" or "memory://"')
    ap.add_argument("--no-seed-fixes", action="store_true")
    ap.add_argument("--host", default="127.0.0.1")
    ap.add_argument("--port", type=int, default=8000)
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args(argv)

    from . import create_engine
    global _engine
    _engine = create_engine(args.mappings, pdf=args.pdf, verbose=args.verbose,
                            use_seed_fixes=not args.no_seed_fixes)
    try:
        serve(_engine, host=args.host, port=args.port, debug=args.verbose)
    finally:
        _engine.shutdown()
    return 0

def serve(engine: Engine, *, host: str = "127.0.0.1", port: int = 8000, debug: bool = False) -> None:
    global _engine
    _engine = engine
    app.run(host=host, port=port, debug=debug, use_reloader=False)

if __name__ == "__main__":
    raise SystemExit(main())
