DASHBOARD_TXT = """
## 🏠 Dashboard – Parenting Wellness Hub

A small companion for new parents: daily routines for the baby, weekly meal
plans for mother and child, and a place to check in on how you feel.

---

### 🧭 What this app does

- **Accounts by invitation**
  Your email must be provisioned first. Registration completes your profile
  and opens a 90-day access window; after it expires, login is refused.

- **AI Parenting Planner**
  Uses your baby's birth date to work out their age in weeks and asks the
  model for feeding, sleeping and playtime routines.

- **AI Meal & Nutrition**
  Builds a Monday to Sunday plan for the mother and the child from your family
  preferences and PIN code, then fetches the recipe for every distinct meal,
  one at a time. Milk feeds are skipped. If some recipes cannot be fetched, the
  plan is still shown with a note that the printable list is incomplete.
  You can also search any dish; your last 5 searches are remembered.

- **Emotion Check-in**
  Pick a mood and receive an affirmation, a short stress-relief exercise and
  a pep talk. Check-ins from this visit are listed below, newest first.

- **Admin Panel** (admins only)
  Usage counts per module and CSV export of each data sheet.

---

### 🧑‍💻 How to use the UI

1. **Log in**, or **Register** with a provisioned email.
2. Forgot your password? Use **Reset password**: enter your email, then a new
   password twice.
3. Use the left navigation to open a feature page.
4. **Log out** clears the saved session in this browser.

Your login is remembered in this browser (the profile, never the password, is
kept in browser storage), and so are your recent recipe searches. Admin exports
are written to `user_data/exports/`.

---

### ⚙️ Configuration

- `GEMINI_API_KEY` (or `API_KEY`): required for the AI features. Without it the
  app still starts, and every AI request shows a failure message.
- `python app.py --mode ui_test`: canned AI responses, no network.
- `MOCK_STORE_LATENCY=0`: removes the simulated backend delay.
"""
