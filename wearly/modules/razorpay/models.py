# Razorpay objects are owned by Razorpay; nothing here is persisted locally
# except through the credit RPCs (see modules/credits/models.py).

"""
Order notes written at checkout and read back on verification / webhook:
- user_id: Supabase auth user id to credit
- credits: number of credits purchased (stringified integer)

Webhook event consumed: payment.captured
- payload.payment.entity.id: payment id (idempotency key)
- payload.payment.entity.notes: copied from the order notes
"""
