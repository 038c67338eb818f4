# Supabase table: user_credits
# This file documents the expected database schema
# Balance mutations go exclusively through the stored procedures below;
# non-negativity and monthly top-up timing are enforced inside them.

"""
Expected Supabase table structure:

user_credits:
- user_id: uuid (primary key, references auth.users.id)
- credits: integer (not null, default 0)

Stored procedures (called via supabase.rpc):
- ensure_monthly_topup(p_user_id uuid) - grant the monthly allowance if due
- consume_credits(p_user_id uuid, p_amount int) -> boolean - false when balance is insufficient
- increment_credits(p_user_id uuid, p_delta int) - add purchased credits
- mark_payment_processed(p_payment_id text) -> boolean - false when the payment was already recorded
"""
