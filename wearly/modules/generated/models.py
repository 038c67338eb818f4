# Supabase table: generated_images
# Supabase storage bucket: generated-tryons (public)
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

generated_images:
- id: uuid (primary key, default: gen_random_uuid())
- user_id: uuid (not null, references auth.users.id)
- storage_path: text (not null) - "<user_id>/<epoch_ms>.png" inside the bucket
- public_url: text (not null)
- source_url: text (nullable) - product page the try-on came from
- product_type: text (nullable)
- created_at: timestamp (default: now())
"""
