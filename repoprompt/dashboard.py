"""Single-page dashboard served at ``/``."""

INDEX_HTML = r"""
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8" />
  <title>repoprompt</title>
  <style>
    body {
      margin: 0;
      padding: 0;
      background-color: #1e1e1e;
      color: #ffffff;
      font-family: Arial, sans-serif;
    }
    .container {
      max-width: 1100px;
      margin: auto;
      padding: 1rem;
    }
    .columns {
      display: grid;
      grid-template-columns: 3fr 2fr;
      gap: 1rem;
    }
    .panel {
      background: #2d2d2d;
      padding: 0.5rem 1rem;
      border-radius: 4px;
    }
    ul {
      list-style-type: none;
      margin: 0.3em 0;
      padding-left: 1.2em;
    }
    li { margin: 0.25em 0; }
    .arrow {
      display: inline-block;
      width: 1.2em;
      color: #ccc;
      text-align: center;
      cursor: pointer;
    }
    .tokens {
      color: #999;
      font-size: 0.85em;
      margin-left: 0.4em;
    }
    .bar {
      display: flex;
      gap: 0.6rem;
      align-items: center;
      margin-top: 1rem;
      flex-wrap: wrap;
    }
    button {
      padding: 0.5rem 1rem;
      background: #007acc;
      color: #ffffff;
      border: none;
      font-size: 0.95rem;
      cursor: pointer;
      border-radius: 4px;
    }
    button:hover { background: #005fa3; }
    input[type=text], textarea, select {
      background: #1e1e1e;
      color: #fff;
      border: 1px solid #444;
      border-radius: 4px;
      padding: 0.4rem;
      width: 100%;
      box-sizing: border-box;
    }
    textarea { min-height: 6rem; }
    #statsLine {
      margin: 1rem 0 0 0;
      font-size: 0.9rem;
      color: #ccc;
    }
    #result {
      margin-top: 1rem;
      white-space: pre-wrap;
      background: #2d2d2d;
      padding: 1rem;
      border-radius: 4px;
    }
    #result:empty { display: none; }
    .error { color: #f48771; }
  </style>
</head>
<body>
  <div class="container">
    <h1>repoprompt</h1>
    <div class="bar">
      <input type="text" id="owner" placeholder="owner" style="width:10rem" />
      <input type="text" id="repo" placeholder="repo" style="width:12rem" />
      <input type="text" id="branch" placeholder="main" style="width:8rem" />
      <button id="loadBtn">Load</button>
    </div>

    <div class="columns">
      <div>
        <div class="bar">
          <button id="expandAllBtn">Expand All</button>
          <button id="collapseAllBtn">Collapse All</button>
          <button id="unselectAllBtn">Unselect All</button>
        </div>
        <div class="panel" id="tree" style="margin-top:1rem">Loading...</div>
      </div>
      <div>
        <div class="panel">
          <h3>Prompt</h3>
          <textarea id="prompt" placeholder="What should the model do?"></textarea>
          <label><input type="checkbox" id="includeContents" /> Include file contents (Markdown)</label>
          <div class="bar">
            <button id="markdownBtn">Markdown</button>
            <button id="xmlBtn">XML</button>
            <button id="copyBtn">Copy</button>
          </div>
        </div>
        <div class="panel" style="margin-top:1rem">
          <h3>New prompt file</h3>
          <input type="text" id="newFilename" placeholder="feature_prompt.md" />
          <select id="newCategory">
            <option value="prompt">prompt</option>
            <option value="instructions">instructions</option>
            <option value="prd">prd</option>
            <option value="example">example</option>
          </select>
          <textarea id="newContent"></textarea>
          <div class="bar"><button id="createBtn">Save prompt</button></div>
        </div>
      </div>
    </div>

    <div id="statsLine"></div>
    <div id="result"></div>
  </div>

  <script>
  let tree = [];
  let selected = new Set();
  let expanded = new Set(JSON.parse(localStorage.getItem("repoprompt-expanded") || "[]"));

  window.onload = loadTree;

  function repoParams() {
    const p = {};
    for (const k of ["owner", "repo", "branch"]) {
      const v = document.getElementById(k).value.trim();
      if (v) p[k] = v;
    }
    return p;
  }

  async function postJSON(url, body) {
    const res = await fetch(url, {
      method: "POST",
      headers: { "Content-Type": "application/json" },
      body: JSON.stringify(body),
    });
    return res;
  }

  // ---------- Tree ----------
  async function loadTree() {
    const treeDiv = document.getElementById("tree");
    treeDiv.textContent = "Loading...";
    const res = await fetch("/api/github-files?" + new URLSearchParams(repoParams()));
    const data = await res.json();
    if (!res.ok) {
      treeDiv.innerHTML = "";
      const err = document.createElement("div");
      err.className = "error";
      err.textContent = data.error || "Failed to load file structure";
      treeDiv.appendChild(err);
      return;
    }
    tree = data;
    selected = new Set();
    renderTree();
    updateStats(0);
  }

  function renderTree() {
    const treeDiv = document.getElementById("tree");
    treeDiv.innerHTML = "";
    treeDiv.appendChild(renderItems(tree));
  }

  function renderItems(items) {
    const ul = document.createElement("ul");
    for (const item of items) {
      const li = document.createElement("li");
      if (item.type === "directory") {
        const arrow = document.createElement("span");
        arrow.className = "arrow";
        arrow.textContent = expanded.has(item.path) ? "▼" : "►";
        arrow.onclick = () => {
          if (expanded.has(item.path)) expanded.delete(item.path); else expanded.add(item.path);
          localStorage.setItem("repoprompt-expanded", JSON.stringify([...expanded]));
          renderTree();
        };
        li.appendChild(arrow);
      }
      const cb = document.createElement("input");
      cb.type = "checkbox";
      cb.checked = selected.has(item.path);
      cb.onchange = () => toggle(item.path, cb.checked);
      li.appendChild(cb);

      const label = document.createElement("span");
      label.textContent = " " + item.name;
      li.appendChild(label);
      const tokens = document.createElement("span");
      tokens.className = "tokens";
      tokens.textContent = `${Number(item.tokens || 0).toLocaleString()} tokens`;
      li.appendChild(tokens);

      if (item.type === "directory" && expanded.has(item.path)) {
        li.appendChild(renderItems(item.children || []));
      }
      ul.appendChild(li);
    }
    return ul;
  }

  async function toggle(path, checked) {
    const res = await postJSON("/api/selection", { tree, selected: [...selected], path, checked });
    const data = await res.json();
    if (!res.ok) { alert(data.error); return; }
    selected = new Set(data.selected);
    renderTree();
    updateStats(data.total_tokens);
  }

  function allDirs(items, out = []) {
    for (const item of items) {
      if (item.type === "directory") { out.push(item.path); allDirs(item.children || [], out); }
    }
    return out;
  }

  function updateStats(totalTokens) {
    document.getElementById("statsLine").textContent =
      `${selected.size} selected | ${Number(totalTokens).toLocaleString()} tokens`;
  }

  // ---------- Export ----------
  async function exportAs(format) {
    const body = {
      tree,
      selected: [...selected],
      format,
      include_contents: document.getElementById("includeContents").checked,
      prompt: document.getElementById("prompt").value,
      ...repoParams(),
    };
    const res = await postJSON("/api/export", body);
    const text = await res.text();
    if (!res.ok) {
      document.getElementById("result").textContent = "Export failed: " + text;
      return;
    }
    document.getElementById("result").textContent = text;
  }

  async function createPrompt() {
    const filename = document.getElementById("newFilename").value.trim();
    const content = document.getElementById("newContent").value;
    const prompt = document.getElementById("newCategory").value;
    if (!filename) { alert("File name cannot be empty"); return; }
    const res = await postJSON("/api/upload-prompt", { filename, content, prompt });
    const data = await res.json();
    if (!res.ok) { alert(data.error || "Failed to create prompt"); return; }
    document.getElementById("newFilename").value = "";
    document.getElementById("newContent").value = "";
    await loadTree();
  }

  document.addEventListener("click", async (e) => {
    switch (e.target.id) {
      case "loadBtn": await loadTree(); break;
      case "markdownBtn": await exportAs("markdown"); break;
      case "xmlBtn": await exportAs("xml"); break;
      case "createBtn": await createPrompt(); break;
      case "copyBtn": {
        const content = document.getElementById("result").textContent;
        if (!content) return;
        try { await navigator.clipboard.writeText(content); } catch (err) { console.error("Clipboard error:", err); }
        break;
      }
      case "expandAllBtn":
        expanded = new Set(allDirs(tree));
        localStorage.setItem("repoprompt-expanded", JSON.stringify([...expanded]));
        renderTree();
        break;
      case "collapseAllBtn":
        expanded = new Set();
        localStorage.setItem("repoprompt-expanded", "[]");
        renderTree();
        break;
      case "unselectAllBtn":
        selected = new Set();
        renderTree();
        updateStats(0);
        break;
    }
  });
  </script>
</body>
</html>
"""
