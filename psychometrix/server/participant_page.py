"""Single-page participant client served at '/'.

The page holds no test state of its own: it renders whatever GET /session
returns and polls so that gate changes made by the administrator show up
without a reload.
"""

PARTICIPANT_PAGE_HTML = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <title>PsychoMetrix</title>
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <style>
      :root { font-family: 'Poppins', system-ui, sans-serif; background: #eff6ff; color: #1f2937; }
      body { margin: 0 auto; max-width: 56rem; padding: 1.5rem; display: flex; flex-direction: column; gap: 1rem; }
      .card { background: #fff; border-radius: 0.75rem; padding: 1.5rem; box-shadow: 0 0.5rem 1.5rem rgba(15, 23, 42, 0.08); }
      .hidden { display: none; }
      .primary-button { border: none; border-radius: 0.75rem; padding: 0.85rem 1.5rem; font-size: 1rem; background: #2563eb; color: #fff; cursor: pointer; }
      .primary-button:disabled { opacity: 0.5; cursor: not-allowed; }
      .option-button { display: block; width: 100%; text-align: left; border: 1px solid #e5e7eb; border-radius: 0.75rem; padding: 1rem; margin-bottom: 0.75rem; font-size: 1rem; background: #fff; cursor: pointer; }
      .option-button.selected { border-color: #2563eb; background: #eff6ff; }
      .option-button:disabled { cursor: not-allowed; }
      .progress-track { width: 100%; height: 0.6rem; background: #e5e7eb; border-radius: 999px; overflow: hidden; }
      #progress-fill { height: 100%; background: #2563eb; width: 0; transition: width 200ms ease; }
      .error { background: #fef2f2; border: 1px solid #fecaca; color: #991b1b; padding: 0.75rem; border-radius: 0.5rem; }
      .muted { color: #6b7280; font-size: 0.95rem; }
      .gate { font-size: 0.9rem; }
      .gate.open { color: #15803d; }
      .gate.closed { color: #b45309; }
      img.media { width: 100%; max-height: 18rem; object-fit: cover; border-radius: 0.5rem; }
      label { display: block; margin-top: 0.75rem; }
      input, select, textarea { width: 100%; padding: 0.5rem; border: 1px solid #d1d5db; border-radius: 0.5rem; font-size: 1rem; box-sizing: border-box; }
      .ratings { display: flex; gap: 0.5rem; flex-wrap: wrap; }
      .ratings button { flex: 1; min-width: 5rem; }
    </style>
  </head>
  <body>
    <header><strong>PsychoMetrix</strong></header>
    <div id="error" class="error hidden"></div>

    <section class="card hidden" id="landing-card">
      <h1>Unlock Your True Potential with Our Psychometric Test!</h1>
      <form id="login-form">
        <label>Your Name <input id="name" type="text" placeholder="Enter your full name" /></label>
        <label>User Type
          <select id="user-type">
            <option>Student</option><option>Faculty</option><option>Visitor</option><option>Other</option>
          </select>
        </label>
        <label id="roll-wrapper">Roll Number <input id="roll-number" type="text" /></label>
        <label>Administrator passcode (optional) <input id="admin-passcode" type="password" /></label>
        <p><button class="primary-button" type="submit">Start Test</button></p>
      </form>
    </section>

    <section class="card hidden" id="instructions-card">
      <h2 id="welcome"></h2>
      <p>You will answer scenario questions, then an image-perception round. Choose carefully: your first choice for each question is final.</p>
      <button class="primary-button" id="start-button">Begin</button>
    </section>

    <section class="card hidden" id="round-card">
      <div class="progress-track"><div id="progress-fill"></div></div>
      <p class="muted"><span id="round-position"></span> <span id="gate-status" class="gate"></span></p>
      <div id="round-body"></div>
      <p><button class="primary-button" id="advance-button"></button></p>
    </section>

    <section class="card hidden" id="report-card">
      <h2>Your Report</h2>
      <div id="report-body" class="muted">Loading your personality assessment...</div>
      <p><button class="primary-button hidden" id="report-retry">Try Again</button>
      <button class="primary-button" id="continue-button">Continue</button></p>
    </section>

    <section class="card hidden" id="feedback-card">
      <h2>We Value Your Opinion!</h2>
      <div id="feedback-questions"></div>
      <label>Anything else? <textarea id="feedback-comment" rows="3"></textarea></label>
      <p><button class="primary-button" id="feedback-submit" disabled>Submit Feedback</button></p>
    </section>

    <section class="card hidden" id="admin-card">
      <h2>Administrator</h2>
      <label><input type="checkbox" id="admin-restrict" style="width:auto" /> Restrict progression</label>
      <label>Active question <input type="number" id="admin-active" min="1" /></label>
      <p><button class="primary-button" id="admin-apply">Apply</button>
      <button class="primary-button" id="admin-logout">Leave admin mode</button></p>
      <pre id="admin-dashboard" class="muted"></pre>
    </section>

    <section class="card hidden" id="resume-card">
      <h2>Resume Analysis</h2>
      <p class="muted" id="resume-health">Checking the resume service...</p>
      <form id="resume-form">
        <label>Resume file <input id="resume-file" type="file" accept=".pdf,.doc,.docx,.txt" /></label>
        <p><button class="primary-button" id="resume-submit" type="submit">Analyze</button></p>
      </form>
      <p class="muted hidden" id="resume-loading">Analyzing...</p>
      <dl id="resume-results" class="hidden"></dl>
    </section>

    <script>
      const cards = ['landing', 'instructions', 'round', 'report', 'feedback', 'admin'];
      const errorEl = document.getElementById('error');
      const feedbackQuestions = {
        personalityRating: 'Did this quiz help understand your personality better?',
        scenarioRating: 'Did scenarios reflect real decision-making?',
        accuracyRating: 'Did personality result feel accurate?',
        engagementRating: 'Was the experience engaging?',
        insightRating: 'Did it make you think in new ways?',
        recommendRating: 'Would you recommend to others?'
      };
      let lastView = null;
      let reportRequested = false;
      let busy = false;

      function show(card) {
        cards.forEach(name => {
          document.getElementById(name + '-card').classList.toggle('hidden', name !== card);
        });
      }

      function escapeHtml(text) {
        const div = document.createElement('div');
        div.textContent = text == null ? '' : String(text);
        return div.innerHTML;
      }

      function showError(message) {
        errorEl.textContent = message || '';
        errorEl.classList.toggle('hidden', !message);
      }

      async function call(method, url, body) {
        const response = await fetch(url, {
          method,
          headers: { 'Content-Type': 'application/json' },
          body: body === undefined ? undefined : JSON.stringify(body)
        });
        const payload = await response.json().catch(() => ({}));
        if (!response.ok) {
          throw new Error(typeof payload.detail === 'string' ? payload.detail : 'Operation failed.');
        }
        return payload;
      }

      async function act(method, url, body) {
        if (busy) return;
        busy = true;
        try {
          showError('');
          render(await call(method, url, body));
        } catch (error) {
          showError(error.message);
          await refresh();
        } finally {
          busy = false;
        }
      }

      function renderRound(round) {
        document.getElementById('progress-fill').style.width = round.progress + '%';
        const label = round.kind === 'questions' ? 'Question' : 'Image';
        document.getElementById('round-position').textContent = `${label} ${round.position} of ${round.total}`;
        const gate = document.getElementById('gate-status');
        if (lastView.cursor.restriction_enabled) {
          gate.textContent = round.admitted ? 'This question is active' : 'Waiting for admin to activate this question';
          gate.className = 'gate ' + (round.admitted ? 'open' : 'closed');
        } else {
          gate.textContent = '';
        }
        const body = document.getElementById('round-body');
        if (round.submitting) {
          body.innerHTML = '<h3>Submitting your answers...</h3><p class="muted">Please wait while we process your responses.</p>';
        } else {
          const q = round.question;
          const heading = q.heading ? `<h3>${escapeHtml(q.heading)}</h3>` : '';
          const media = q.media_url ? `<img class="media" src="${escapeHtml(q.media_url)}" alt="" />` : '';
          const errorBox = round.error ? `<div class="error">${escapeHtml(round.error)}</div>` : '';
          body.innerHTML = errorBox + heading + media + q.prompt_html;
          q.options_html.forEach((html, index) => {
            const button = document.createElement('button');
            button.className = 'option-button' + (round.selected_option === index ? ' selected' : '');
            button.innerHTML = html;
            button.disabled = round.selected_option !== null;
            button.onclick = () => act('POST', '/session/select', { question_id: q.id, option_index: index });
            body.appendChild(button);
          });
        }
        const advance = document.getElementById('advance-button');
        advance.textContent = round.is_last ? 'Complete & Continue' : 'Next';
        advance.disabled = !round.can_advance;
      }

      function renderReport(report) {
        const body = document.getElementById('report-body');
        const retry = document.getElementById('report-retry');
        if (!report) {
          body.textContent = 'Loading your personality assessment...';
          retry.classList.add('hidden');
          if (!reportRequested) {
            reportRequested = true;
            setTimeout(() => act('POST', '/session/report'), 0);
          }
          return;
        }
        if (report.error) {
          body.innerHTML = `<div class="error">${escapeHtml(report.error)}</div>`;
          retry.classList.remove('hidden');
          return;
        }
        retry.classList.add('hidden');
        body.innerHTML = `<h3>${escapeHtml(report.personality_result)}</h3>` + report.insights_html.join('');
      }

      function renderFeedback(feedback) {
        const container = document.getElementById('feedback-questions');
        container.innerHTML = '';
        Object.entries(feedbackQuestions).forEach(([key, prompt]) => {
          const row = document.createElement('div');
          row.innerHTML = `<p>${prompt}</p>`;
          const ratings = document.createElement('div');
          ratings.className = 'ratings';
          [1, 2, 3, 4, 5].forEach(value => {
            const button = document.createElement('button');
            button.className = 'option-button' + (feedback.ratings[key] === value ? ' selected' : '');
            button.textContent = value;
            button.onclick = () => act('PUT', '/session/feedback', { ratings: { [key]: value } });
            ratings.appendChild(button);
          });
          row.appendChild(ratings);
          container.appendChild(row);
        });
        const comment = document.getElementById('feedback-comment');
        if (document.activeElement !== comment) {
          comment.value = feedback.comment;
        }
        if (feedback.error) showError(feedback.error);
        document.getElementById('feedback-submit').disabled = !feedback.can_submit;
      }

      function renderAdmin(view) {
        document.getElementById('admin-restrict').checked = view.cursor.restriction_enabled;
        const active = document.getElementById('admin-active');
        if (document.activeElement !== active) active.value = view.cursor.active_question;
      }

      async function checkResumeHealth() {
        const status = document.getElementById('resume-health');
        try {
          const health = await call('GET', '/resume/health');
          status.textContent = health.healthy ? 'Resume service is online.' : 'Resume service is unavailable.';
        } catch (error) {
          status.textContent = 'Resume service is unavailable.';
        }
      }

      function renderResumeResults(result) {
        const list = document.getElementById('resume-results');
        list.innerHTML = '';
        Object.entries(result || {}).forEach(([key, value]) => {
          const term = document.createElement('dt');
          term.textContent = key;
          const detail = document.createElement('dd');
          detail.textContent = typeof value === 'object' ? JSON.stringify(value) : String(value);
          list.appendChild(term);
          list.appendChild(detail);
        });
        list.classList.remove('hidden');
      }

      async function analyzeResume(event) {
        event.preventDefault();
        const input = document.getElementById('resume-file');
        if (!input.files.length) {
          showError('Choose a resume file first.');
          return;
        }
        const form = new FormData();
        form.append('file', input.files[0]);
        const loading = document.getElementById('resume-loading');
        const submit = document.getElementById('resume-submit');
        showError('');
        loading.classList.remove('hidden');
        document.getElementById('resume-results').classList.add('hidden');
        submit.disabled = true;
        try {
          const response = await fetch('/resume/analyze', { method: 'POST', body: form });
          const payload = await response.json().catch(() => ({}));
          if (!response.ok) {
            throw new Error(typeof payload.detail === 'string' ? payload.detail : 'Resume analysis failed.');
          }
          renderResumeResults(payload);
        } catch (error) {
          showError(error.message);
        } finally {
          loading.classList.add('hidden');
          submit.disabled = false;
        }
      }

      function render(view) {
        lastView = view;
        document.getElementById('resume-card').classList.toggle(
          'hidden', view.stage !== 'landing' || view.is_admin
        );
        if (view.is_admin) {
          show('admin');
          renderAdmin(view);
          return;
        }
        if (view.stage !== 'report') reportRequested = false;
        switch (view.stage) {
          case 'landing': show('landing'); break;
          case 'instructions':
            show('instructions');
            document.getElementById('welcome').textContent = `Welcome, ${view.user.name}!`;
            break;
          case 'questions':
          case 'imagePerception':
            show('round');
            renderRound(view.round);
            break;
          case 'report': show('report'); renderReport(view.report); break;
          case 'feedback': show('feedback'); renderFeedback(view.feedback); break;
        }
      }

      async function refresh() {
        try {
          render(await call('GET', '/session'));
        } catch (error) {
          showError('Unable to reach the test server.');
        }
      }

      document.getElementById('user-type').onchange = event => {
        document.getElementById('roll-wrapper').classList.toggle('hidden', event.target.value !== 'Student');
      };
      document.getElementById('login-form').onsubmit = event => {
        event.preventDefault();
        act('POST', '/session/login', {
          name: document.getElementById('name').value,
          user_type: document.getElementById('user-type').value,
          roll_number: document.getElementById('roll-number').value || null,
          admin_passcode: document.getElementById('admin-passcode').value || null
        });
      };
      document.getElementById('start-button').onclick = () => act('POST', '/session/start');
      document.getElementById('advance-button').onclick = () => act('POST', '/session/advance');
      document.getElementById('report-retry').onclick = () => act('POST', '/session/report');
      document.getElementById('continue-button').onclick = () => act('POST', '/session/continue');
      document.getElementById('feedback-comment').onchange = event =>
        act('PUT', '/session/feedback', { comment: event.target.value });
      document.getElementById('feedback-submit').onclick = async () => {
        const comment = document.getElementById('feedback-comment').value;
        await act('PUT', '/session/feedback', { comment });
        await act('POST', '/session/feedback/submit');
      };
      document.getElementById('admin-apply').onclick = async () => {
        try {
          showError('');
          await call('POST', '/admin/restriction', { enabled: document.getElementById('admin-restrict').checked });
          await call('POST', '/admin/active-question', { active_question: Number(document.getElementById('admin-active').value) });
          const dashboard = await call('GET', '/admin/dashboard');
          document.getElementById('admin-dashboard').textContent = JSON.stringify(dashboard, null, 2);
        } catch (error) {
          showError(error.message);
        }
        await refresh();
      };
      document.getElementById('admin-logout').onclick = () => act('POST', '/session/logout');

      document.getElementById('resume-form').onsubmit = analyzeResume;

      refresh();
      checkResumeHealth();
      setInterval(() => { if (!busy) refresh(); }, 2000);
    </script>
  </body>
</html>
"""
