PARENTING_PLAN_PROMPT = (
    "Given a baby is {age_in_weeks} weeks old, create a detailed daily routine "
    "for a new parent. Include sections for 'FeedingRoutine', 'SleepingRoutine', "
    "and 'PlaytimeRoutine'. The routine should be supportive, gentle, and offer "
    "flexibility."
)

WEEKLY_MEAL_PLAN_PROMPT = """
Create a 7-day meal plan for a busy new parent and their baby.
- The parent is {parent_age} years old. Their plan should be nutritious and support postpartum recovery.
- The baby is {baby_age_in_weeks} weeks old. The baby's plan should be age-appropriate (e.g., milk-focused for young infants, introducing solids for older infants). If the baby is too young for solid food, state that for the baby's meals.
- The family's general preferences are: '{preferences}'.
- Suggest meals that incorporate ingredients commonly available in an area with the Indian PIN code '{pin_code}'.
- Provide two separate weekly plans: one for the 'mother' and one for the 'child'. For each plan, provide a JSON array of 7 strings for each meal type: 'breakfast', 'lunch', 'dinner', and 'snacks'.
""".strip()

RECIPE_PROMPT = (
    "Provide a simple and quick recipe for '{meal_name}'. Include 'Ingredients' "
    "and 'Instructions'. The recipe name should be '{meal_name}'. Also specify if "
    "it's 'SuitableFor' (Mom, Baby, or Both) and if 'LocalIngredientUsed' is true "
    "or false."
)

EMOTION_SUPPORT_PROMPT = (
    "A new parent is feeling '{mood}'. Provide a JSON object with three properties "
    "to support them: 1. 'Affirmation': A short, positive affirmation. "
    "2. 'StressReliefExercise': A simple, quick exercise to relieve stress "
    "(e.g., a breathing technique). 3. 'PepTalk': A brief, encouraging pep talk."
)
