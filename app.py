import argparse
import logging
import os
import sys

_parser = argparse.ArgumentParser(add_help=False)
_parser.add_argument("--mode", type=str, default=None)
_args, _unknown = _parser.parse_known_args(sys.argv[1:])
if _args.mode == "ui_test":
    # must be set before llm_config is imported
    os.environ["UI_TEST_MODE"] = "true"

import gradio as gr

from llm_config import LOG_LEVEL
from storage import ensure_base_dir
from logic.logic_user import (
    login_action,
    show_register_panel,
    show_reset_panel,
    back_to_login_panel,
    register_action,
    request_reset_action,
    reset_password_action,
    logout_action,
    restore_session_action,
)
from logic.logic_dashboard import clear_user_views, render_features
from logic.logic_parenting import load_birth_date_action, generate_plan_action
from logic.logic_meals import (
    generate_meal_plan_action,
    view_recipe_action,
    load_recent_searches_action,
    search_recipe_action,
)
from logic.logic_checkin import mood_choices, checkin_action
from logic.logic_admin import load_stats_action, export_action
from logic.mock_sheet import SHEET_NAMES

from dash_board import DASHBOARD_TXT

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

PAGES = ("dashboard", "parenting", "meals", "checkin", "admin")


def switch_page(page_name: str):
    """Return visibility updates for all main pages based on the active page name."""
    return tuple(gr.update(visible=(page_name == p)) for p in PAGES)


ensure_base_dir()

with gr.Blocks(title="Parenting Wellness Hub") as demo:
    # Global states
    session_state = gr.State(None)  # logic.logic_user.Session or None
    checkin_history_state = gr.State([])  # [EmotionCheckinRecord], newest first
    # Per-browser storage: the saved profile and the recent recipe searches
    saved_session = gr.BrowserState({}, storage_key="wellness_hub_session")
    saved_searches = gr.BrowserState({}, storage_key="wellness_hub_searches")

    # ========== Login panel ==========
    with gr.Column(visible=True) as login_panel:
        gr.Markdown("## 👶 Parenting Wellness Hub")
        login_email = gr.Textbox(label="Email")
        login_password = gr.Textbox(label="Password", type="password")
        login_button = gr.Button("Log in")
        with gr.Row():
            go_register_button = gr.Button("Register")
            go_reset_button = gr.Button("Forgot password?")
        login_info = gr.Markdown("Please log in, or register with your invited email.")

    # ========== Register panel ==========
    with gr.Column(visible=False) as register_panel:
        gr.Markdown("## 👶 Complete your registration")
        reg_email = gr.Textbox(label="Email (must be pre-registered)")
        reg_password = gr.Textbox(label="Password", type="password")
        reg_password2 = gr.Textbox(label="Confirm password", type="password")

        gr.Markdown("### About your family")
        reg_name = gr.Textbox(label="Your name")
        reg_parent_age = gr.Number(label="Your age", precision=0)
        reg_baby_birth_date = gr.Textbox(label="Baby's date of birth (YYYY-MM-DD)")
        reg_pin_code = gr.Textbox(label="PIN code")
        reg_preferences = gr.Textbox(
            label="Family food preferences (e.g., vegetarian, no onion)", lines=2
        )

        register_button = gr.Button("Submit registration")
        back_login_button = gr.Button("Back to login")
        register_info = gr.Markdown("")

    # ========== Reset password panel ==========
    with gr.Column(visible=False) as reset_panel:
        gr.Markdown("## 🔑 Reset password")
        reset_email = gr.Textbox(label="Email")
        reset_request_button = gr.Button("Continue")
        with gr.Column(visible=False) as reset_fields:
            reset_password = gr.Textbox(label="New password", type="password")
            reset_password2 = gr.Textbox(label="Confirm new password", type="password")
            reset_confirm_button = gr.Button("Set new password")
        reset_back_button = gr.Button("Back to login")
        reset_info = gr.Markdown("")

    # ========== Main panel ==========
    with gr.Row(visible=False) as main_panel:
        # Left navigation
        with gr.Column(scale=1, min_width=180):
            gr.Markdown("### Navigation")
            btn_dashboard = gr.Button("🏠 Dashboard")
            btn_parenting = gr.Button("🍼 Parenting planner")
            btn_meals = gr.Button("🥗 Meal planner")
            btn_checkin = gr.Button("💛 Emotion check-in")
            btn_admin = gr.Button("📊 Admin panel", visible=False)
            gr.Markdown("---")
            logout_btn = gr.Button("Log out", variant="secondary")

        # Right content
        with gr.Column(scale=4) as main_content:
            # Dashboard
            with gr.Column(visible=True) as page_dashboard:
                welcome_md = gr.Markdown("")
                features_md = gr.Markdown("")
                gr.Markdown(DASHBOARD_TXT)

            # Parenting planner
            with gr.Column(visible=False) as page_parenting:
                gr.Markdown("## 🍼 AI Parenting Planner")
                birth_date_box = gr.Textbox(
                    label="Baby's date of birth (from your profile)", interactive=False
                )
                generate_plan_btn = gr.Button("Generate daily routine")
                plan_status = gr.Markdown("")
                plan_md = gr.Markdown("")

            # Meal planner
            with gr.Column(visible=False) as page_meals:
                gr.Markdown("## 🥗 AI Meal & Nutrition")
                generate_meals_btn = gr.Button("Generate weekly meal plan")
                meals_status = gr.Markdown("")
                meal_plan_md = gr.Markdown("")

                gr.Markdown("### Recipes")
                meal_dropdown = gr.Dropdown(label="Pick a meal from the plan", choices=[])
                gr.Markdown("Or search for any dish:")
                with gr.Row():
                    recipe_query = gr.Textbox(label="Dish name", scale=3)
                    recipe_search_btn = gr.Button("Search", scale=1)
                recent_dropdown = gr.Dropdown(label="Recent searches", choices=[])
                recipe_status = gr.Markdown("")
                recipe_md = gr.Markdown("")
                recipe_instructions = gr.Textbox(
                    label="Instructions (copy)",
                    lines=6,
                    interactive=False,
                    show_copy_button=True,
                )

            # Emotion check-in
            with gr.Column(visible=False) as page_checkin:
                gr.Markdown("## 💛 How are you feeling today?")
                mood_radio = gr.Radio(label="Mood", choices=mood_choices())
                checkin_btn = gr.Button("Check in")
                checkin_status = gr.Markdown("")
                support_md = gr.Markdown("")
                checkin_history_md = gr.Markdown("")

            # Admin
            with gr.Column(visible=False) as page_admin:
                gr.Markdown("## 📊 Admin Panel")
                refresh_stats_btn = gr.Button("Refresh statistics")
                admin_status = gr.Markdown("")
                stats_md = gr.Markdown("")
                interactions_plot = gr.BarPlot(
                    x="module",
                    y="interactions",
                    title="Module interactions",
                )
                gr.Markdown("### Export data")
                with gr.Row():
                    export_sheet_dropdown = gr.Dropdown(
                        label="Sheet", choices=list(SHEET_NAMES), value=SHEET_NAMES[0]
                    )
                    export_btn = gr.Button("Export CSV")
                export_file = gr.File(label="Download", visible=False)

    page_outputs = [page_dashboard, page_parenting, page_meals, page_checkin, page_admin]
    auth_outputs = [
        login_panel,
        register_panel,
        reset_panel,
        main_panel,
        btn_admin,
        welcome_md,
    ]
    # Same order as clear_user_views
    user_view_outputs = [
        checkin_history_state,
        checkin_history_md,
        support_md,
        checkin_status,
        mood_radio,
        birth_date_box,
        plan_md,
        plan_status,
        meal_plan_md,
        meals_status,
        meal_dropdown,
        recipe_md,
        recipe_instructions,
        recipe_status,
        recipe_query,
        stats_md,
        admin_status,
        export_file,
    ]

    # ====== Event bindings ======

    # Restore a saved session on page load
    demo.load(
        restore_session_action,
        inputs=[saved_session],
        outputs=[login_info, session_state, saved_session, *auth_outputs],
    ).then(
        render_features, inputs=[session_state], outputs=[features_md]
    ).then(
        load_recent_searches_action,
        inputs=[saved_searches],
        outputs=[recent_dropdown, saved_searches],
    )

    # Login / register / reset
    login_button.click(
        login_action,
        inputs=[login_email, login_password, session_state, saved_session],
        outputs=[login_info, session_state, saved_session, *auth_outputs],
    ).then(
        render_features, inputs=[session_state], outputs=[features_md]
    ).then(
        lambda: switch_page("dashboard"), inputs=None, outputs=page_outputs
    )

    go_register_button.click(
        show_register_panel,
        inputs=None,
        outputs=[login_panel, register_panel, reset_panel],
    )

    go_reset_button.click(
        show_reset_panel,
        inputs=None,
        outputs=[login_panel, register_panel, reset_panel],
    )

    for back_btn in (back_login_button, reset_back_button):
        back_btn.click(
            back_to_login_panel,
            inputs=None,
            outputs=[login_panel, register_panel, reset_panel],
        )

    register_button.click(
        register_action,
        inputs=[
            reg_name,
            reg_parent_age,
            reg_baby_birth_date,
            reg_pin_code,
            reg_preferences,
            reg_email,
            reg_password,
            reg_password2,
            session_state,
            saved_session,
        ],
        outputs=[register_info, session_state, saved_session, *auth_outputs],
    ).then(
        render_features, inputs=[session_state], outputs=[features_md]
    ).then(
        lambda: switch_page("dashboard"), inputs=None, outputs=page_outputs
    )

    reset_request_button.click(
        request_reset_action,
        inputs=[reset_email],
        outputs=[reset_info, reset_fields],
    )

    reset_confirm_button.click(
        reset_password_action,
        inputs=[reset_email, reset_password, reset_password2],
        outputs=[reset_info, login_panel, reset_panel],
    )

    # Logout
    logout_btn.click(
        logout_action,
        inputs=[session_state, saved_session],
        outputs=[login_info, session_state, saved_session, *auth_outputs],
    ).then(
        clear_user_views,
        inputs=None,
        outputs=user_view_outputs,
    )

    # Navigation
    btn_dashboard.click(
        lambda: switch_page("dashboard"), inputs=None, outputs=page_outputs
    )

    btn_parenting.click(
        lambda: switch_page("parenting"), inputs=None, outputs=page_outputs
    ).then(
        load_birth_date_action, inputs=[session_state], outputs=[birth_date_box]
    )

    btn_meals.click(
        lambda: switch_page("meals"), inputs=None, outputs=page_outputs
    )

    btn_checkin.click(
        lambda: switch_page("checkin"), inputs=None, outputs=page_outputs
    )

    btn_admin.click(
        lambda: switch_page("admin"), inputs=None, outputs=page_outputs
    ).then(
        load_stats_action,
        inputs=[session_state],
        outputs=[stats_md, interactions_plot, admin_status],
    )

    # Parenting planner
    generate_plan_btn.click(
        generate_plan_action,
        inputs=[session_state],
        outputs=[plan_md, plan_status],
    )

    # Meal planner
    generate_meals_btn.click(
        generate_meal_plan_action,
        inputs=[session_state],
        outputs=[meal_plan_md, meal_dropdown, meals_status],
    )

    meal_dropdown.select(
        view_recipe_action,
        inputs=[meal_dropdown],
        outputs=[recipe_md, recipe_instructions, recipe_status],
    )

    recipe_search_btn.click(
        search_recipe_action,
        inputs=[recipe_query, saved_searches],
        outputs=[recipe_md, recipe_instructions, recipe_status, recent_dropdown, saved_searches],
    )

    recent_dropdown.select(
        view_recipe_action,
        inputs=[recent_dropdown],
        outputs=[recipe_md, recipe_instructions, recipe_status],
    )

    # Emotion check-in
    checkin_btn.click(
        checkin_action,
        inputs=[mood_radio, session_state, checkin_history_state],
        outputs=[support_md, checkin_history_md, checkin_history_state, checkin_status],
    )

    # Admin
    refresh_stats_btn.click(
        load_stats_action,
        inputs=[session_state],
        outputs=[stats_md, interactions_plot, admin_status],
    )

    export_btn.click(
        export_action,
        inputs=[session_state, export_sheet_dropdown],
        outputs=[export_file, admin_status],
    )

if __name__ == "__main__":
    demo.launch()
