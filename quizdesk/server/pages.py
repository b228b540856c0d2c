"""Static HTML pages served by the API (respondent flow and admin desk)."""

from __future__ import annotations

from html import escape

from quizdesk.constants.about import APP_NAME, PASTE_FORMAT_HELP, UPLOAD_FORMAT_HELP

_BASE_STYLE = """
      :root { font-family: 'Inter', system-ui, sans-serif; background: #0b1120; color: #f5f7ff; }
      body { margin: 0; padding: 1.5rem; display: flex; flex-direction: column; gap: 1rem; max-width: 960px; margin-inline: auto; }
      .card { background: #111a30; border-radius: 0.75rem; padding: 1.5rem; box-shadow: 0 0.5rem 1.5rem rgba(0, 0, 0, 0.4); }
      .hidden { display: none; }
      .primary-button { border: none; border-radius: 0.75rem; padding: 0.7rem 1.3rem; font-size: 1rem; background: #1f9aa5; color: #fff; cursor: pointer; }
      .primary-button:hover { background: #16808a; }
      .primary-button:disabled { opacity: 0.6; cursor: not-allowed; }
      input, textarea { width: 100%; box-sizing: border-box; border-radius: 0.5rem; border: 1px solid #334155; background: #0b1120; color: #f5f7ff; padding: 0.6rem; font-size: 1rem; }
      textarea { min-height: 12rem; font-family: ui-monospace, monospace; }
      pre { white-space: pre-wrap; color: #94a3b8; }
      .muted { color: #94a3b8; }
      .error { color: #f87171; }
      .success { color: #4ade80; }
      .quiz-item, .submission { border-top: 1px solid #1e293b; padding: 0.75rem 0; }
      .option { display: block; margin: 0.35rem 0; }
      table { width: 100%; border-collapse: collapse; }
      td, th { text-align: left; padding: 0.35rem; border-bottom: 1px solid #1e293b; }
"""

RESPONDENT_PAGE_HTML = f"""<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <title>{APP_NAME}</title>
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <style>{_BASE_STYLE}</style>
    <script>
      window.MathJax = {{ tex: {{ inlineMath: [['$','$']], displayMath: [['$$','$$']] }}, svg: {{ fontCache: 'global' }} }};
    </script>
    <script defer src="https://cdn.jsdelivr.net/npm/mathjax@3/es5/tex-mml-chtml.js"></script>
  </head>
  <body>
    <section class="card">
      <h1>Available Quizzes</h1>
      <label>Your full name <input id="name-input" placeholder="Jane Doe" /></label>
      <p class="muted">Enter your name to see the status of quizzes you have taken.</p>
      <div id="quiz-list"></div>
    </section>
    <section class="card hidden" id="quiz-card">
      <h2 id="quiz-title"></h2>
      <p id="quiz-description" class="muted"></p>
      <form id="quiz-form"></form>
      <button id="submit-button" class="primary-button">Submit Quiz</button>
      <p id="quiz-status"></p>
    </section>
    <section class="card hidden" id="result-card">
      <h2>Your Result</h2>
      <div id="result-body"></div>
    </section>
    <script>
      const nameInput = document.getElementById('name-input');
      const quizList = document.getElementById('quiz-list');
      const quizCard = document.getElementById('quiz-card');
      const quizForm = document.getElementById('quiz-form');
      const quizStatus = document.getElementById('quiz-status');
      const resultCard = document.getElementById('result-card');
      const resultBody = document.getElementById('result-body');
      let currentQuiz = null;

      function esc(value) {{
        const div = document.createElement('div');
        div.textContent = value == null ? '' : String(value);
        return div.innerHTML.replace(/"/g, '&quot;');
      }}

      async function statusFor(quizId) {{
        const name = nameInput.value.trim();
        if (!name) return {{ status: 'not_taken', result: null }};
        const response = await fetch(`/api/quiz/${{quizId}}/status?name=${{encodeURIComponent(name)}}`);
        return response.ok ? response.json() : {{ status: 'not_taken', result: null }};
      }}

      async function loadQuizzes() {{
        const response = await fetch('/api/quiz/list');
        const payload = await response.json();
        if (!payload.quizzes.length) {{
          quizList.innerHTML = '<p class="muted">No quizzes available. Please ask an admin to create a quiz first.</p>';
          return;
        }}
        quizList.innerHTML = '';
        for (const quiz of payload.quizzes) {{
          const state = await statusFor(quiz.id);
          const item = document.createElement('div');
          item.className = 'quiz-item';
          item.innerHTML = `<strong>${{esc(quiz.title)}}</strong> <span class="muted">(${{quiz.question_count}} questions)</span><p class="muted">${{esc(quiz.description)}}</p>`;
          const button = document.createElement('button');
          button.className = 'primary-button';
          if (state.status === 'completed') {{
            button.textContent = 'View Result';
            button.onclick = () => showResult(state.result);
          }} else if (state.status === 'pending') {{
            button.textContent = 'Awaiting approval';
            button.disabled = true;
          }} else {{
            button.textContent = 'Take Quiz';
            button.onclick = () => openQuiz(quiz.id);
          }}
          item.appendChild(button);
          quizList.appendChild(item);
        }}
      }}

      function renderQuestion(question, index) {{
        const wrapper = document.createElement('fieldset');
        wrapper.innerHTML = `<legend>Question ${{index + 1}}</legend>${{question.text_html}}`;
        if (question.kind === 'enumeration' && !question.options.length) {{
          wrapper.innerHTML += `<input name="q${{index}}" data-kind="free" placeholder="Separate answers with commas" />`;
        }} else {{
          const inputType = question.kind === 'enumeration' ? 'checkbox' : 'radio';
          question.options.forEach((option, position) => {{
            const label = document.createElement('label');
            label.className = 'option';
            const input = document.createElement('input');
            input.type = inputType;
            input.name = `q${{index}}`;
            input.value = option;
            const text = document.createElement('span');
            text.innerHTML = ` ${{question.options_html[position]}}`;
            label.append(input, text);
            wrapper.appendChild(label);
          }});
        }}
        return wrapper;
      }}

      async function openQuiz(quizId) {{
        if (!nameInput.value.trim()) {{
          alert('Please enter your name first.');
          return;
        }}
        const response = await fetch(`/api/quiz/${{quizId}}`);
        currentQuiz = await response.json();
        document.getElementById('quiz-title').textContent = currentQuiz.title;
        document.getElementById('quiz-description').textContent = currentQuiz.description;
        quizForm.innerHTML = '';
        currentQuiz.questions.forEach((question, index) => quizForm.appendChild(renderQuestion(question, index)));
        quizStatus.textContent = '';
        quizCard.classList.remove('hidden');
        resultCard.classList.add('hidden');
        if (window.MathJax && window.MathJax.typesetPromise) window.MathJax.typesetPromise();
      }}

      function collectAnswers() {{
        return currentQuiz.questions.map((question, index) => {{
          const inputs = Array.from(quizForm.querySelectorAll(`[name="q${{index}}"]`));
          if (inputs.length === 1 && inputs[0].dataset.kind === 'free') return inputs[0].value;
          const chosen = inputs.filter((input) => input.checked).map((input) => input.value);
          return chosen.length ? chosen.join(', ') : null;
        }});
      }}

      document.getElementById('submit-button').addEventListener('click', async () => {{
        const response = await fetch(`/api/quiz/${{currentQuiz.id}}/submit`, {{
          method: 'POST',
          headers: {{ 'Content-Type': 'application/json' }},
          body: JSON.stringify({{ respondent_name: nameInput.value.trim(), answers: collectAnswers() }})
        }});
        const body = await response.json();
        quizStatus.className = response.ok ? 'success' : 'error';
        quizStatus.textContent = response.ok ? body.message : (body.detail || 'Unable to submit quiz.');
        if (response.ok) {{
          quizCard.classList.add('hidden');
          loadQuizzes();
        }}
      }});

      function showResult(result) {{
        const percentage = result.percentage === null ? 'N/A' : `${{result.percentage}}%`;
        const rows = result.detailed_answers.map((detail, index) => {{
          const correct = Array.isArray(detail.correct_answer) ? detail.correct_answer.join(', ') : detail.correct_answer;
          return `<tr><td>${{index + 1}}. ${{esc(detail.question_text)}}</td><td>${{esc(detail.respondent_answer)}}</td><td>${{esc(correct)}}</td><td class="${{detail.is_correct ? 'success' : 'error'}}">${{detail.is_correct ? 'Correct' : 'Incorrect'}}</td></tr>`;
        }}).join('');
        resultBody.innerHTML = `<p><strong>${{esc(result.quiz_title)}}</strong></p>
          <p>Score: ${{result.score}}/${{result.total_questions}} (${{percentage}})</p>
          <table><tr><th>Question</th><th>Your Answer</th><th>Correct Answer</th><th>Result</th></tr>${{rows}}</table>
          <p><a href="/api/results/${{result.id}}/download?format=csv">CSV</a> ·
             <a href="/api/results/${{result.id}}/download?format=txt">Text</a> ·
             <a href="/api/results/${{result.id}}/download?format=xlsx">Excel</a></p>`;
        resultCard.classList.remove('hidden');
        quizCard.classList.add('hidden');
      }}

      nameInput.addEventListener('change', loadQuizzes);
      loadQuizzes();
      setInterval(loadQuizzes, 30000);
    </script>
  </body>
</html>
"""

ADMIN_PAGE_HTML = f"""<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <title>{APP_NAME} Admin</title>
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <style>{_BASE_STYLE}</style>
  </head>
  <body>
    <section class="card">
      <h1>{APP_NAME} Admin</h1>
      <label>Admin key <input id="admin-key" type="password" /></label>
      <p id="admin-status"></p>
    </section>
    <section class="card">
      <h2>Paste Quiz Text</h2>
      <input id="paste-title" placeholder="Title (optional)" />
      <input id="paste-description" placeholder="Description (optional)" />
      <textarea id="paste-text"></textarea>
      <button id="paste-button" class="primary-button">Save Pasted Quiz</button>
      <pre>{escape(PASTE_FORMAT_HELP)}</pre>
    </section>
    <section class="card">
      <h2>Upload JSON Quiz</h2>
      <input id="upload-file" type="file" accept=".json" />
      <input id="upload-title" placeholder="Title (optional)" />
      <input id="upload-description" placeholder="Description (optional)" />
      <button id="upload-button" class="primary-button">Upload Quiz</button>
      <pre>{escape(UPLOAD_FORMAT_HELP)}</pre>
    </section>
    <section class="card">
      <h2>Quizzes</h2>
      <div id="quiz-list"></div>
    </section>
    <section class="card">
      <h2>Submissions</h2>
      <button id="refresh-button" class="primary-button">Refresh</button>
      <div id="submission-list"></div>
    </section>
    <script>
      const statusEl = document.getElementById('admin-status');
      const keyInput = document.getElementById('admin-key');

      function esc(value) {{
        const div = document.createElement('div');
        div.textContent = value == null ? '' : String(value);
        return div.innerHTML.replace(/"/g, '&quot;');
      }}

      function report(ok, message) {{
        statusEl.className = ok ? 'success' : 'error';
        statusEl.textContent = message;
      }}

      async function adminFetch(url, options = {{}}) {{
        const headers = Object.assign({{ 'Content-Type': 'application/json', 'x-admin-key': keyInput.value }}, options.headers || {{}});
        const response = await fetch(url, Object.assign({{}}, options, {{ headers }}));
        const isJson = (response.headers.get('content-type') || '').includes('application/json');
        const body = isJson ? await response.json() : await response.text();
        if (!response.ok) throw new Error((body && body.detail) || 'Request failed');
        return body;
      }}

      document.getElementById('paste-button').addEventListener('click', async () => {{
        try {{
          const body = await adminFetch('/api/admin/quiz/parse', {{
            method: 'POST',
            body: JSON.stringify({{
              text: document.getElementById('paste-text').value,
              title: document.getElementById('paste-title').value || null,
              description: document.getElementById('paste-description').value || null
            }})
          }});
          report(true, body.message);
          loadQuizzes();
        }} catch (error) {{ report(false, error.message); }}
      }});

      document.getElementById('upload-button').addEventListener('click', async () => {{
        const file = document.getElementById('upload-file').files[0];
        if (!file || !file.name.endsWith('.json')) {{
          report(false, 'Please select a JSON file.');
          return;
        }}
        let quiz;
        try {{ quiz = JSON.parse(await file.text()); }} catch (error) {{ report(false, 'Invalid JSON format'); return; }}
        try {{
          const body = await adminFetch('/api/admin/quiz/upload', {{
            method: 'POST',
            body: JSON.stringify({{
              quiz,
              title: document.getElementById('upload-title').value || null,
              description: document.getElementById('upload-description').value || null
            }})
          }});
          report(true, body.message);
          loadQuizzes();
        }} catch (error) {{ report(false, error.message); }}
      }});

      async function loadQuizzes() {{
        const response = await fetch('/api/quiz/list');
        const payload = await response.json();
        document.getElementById('quiz-list').innerHTML = payload.quizzes.map((quiz) =>
          `<div class="quiz-item"><strong>${{esc(quiz.title)}}</strong> <span class="muted">${{quiz.question_count}} questions · ${{esc(quiz.id)}}</span></div>`
        ).join('') || '<p class="muted">No quizzes yet.</p>';
      }}

      async function approve(resultId) {{
        try {{
          await adminFetch(`/api/admin/submissions/${{resultId}}/approve`, {{ method: 'POST', body: '{{}}' }});
          report(true, 'Submission approved.');
          loadSubmissions();
        }} catch (error) {{ report(false, error.message); }}
      }}

      async function loadSubmissions() {{
        try {{
          const body = await adminFetch('/api/admin/submissions');
          const list = document.getElementById('submission-list');
          list.innerHTML = '';
          for (const submission of body.submissions) {{
            const percentage = submission.percentage === null ? 'N/A' : `${{submission.percentage}}%`;
            const item = document.createElement('div');
            item.className = 'submission';
            item.innerHTML = `<strong>${{esc(submission.respondent_name)}}</strong> · ${{esc(submission.quiz_title)}} ·
              ${{submission.score}}/${{submission.total_questions}} (${{percentage}}) ·
              <span class="muted">${{esc(submission.submitted_at)}}</span>
              ${{submission.is_approved ? '<span class="success">Approved</span>' : ''}}`;
            if (!submission.is_approved) {{
              const button = document.createElement('button');
              button.className = 'primary-button';
              button.textContent = 'Approve';
              button.onclick = () => approve(submission.id);
              item.appendChild(button);
            }}
            list.appendChild(item);
          }}
          if (!body.submissions.length) list.innerHTML = '<p class="muted">No submissions yet.</p>';
        }} catch (error) {{ report(false, error.message); }}
      }}

      document.getElementById('refresh-button').addEventListener('click', loadSubmissions);
      loadQuizzes();
    </script>
  </body>
</html>
"""
