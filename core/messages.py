"""
User-facing message catalog.

Every message returned to API clients is looked up here by key so the
response language follows ``settings.MESSAGES_LOCALE``.
"""
from typing import Dict

from core.config import settings

MESSAGES: Dict[str, Dict[str, str]] = {
    "en": {
        "auth.missing_token": "Unauthorized: please log in",
        "auth.invalid_token": "Unauthorized: invalid token",
        "auth.invalid_role": "Unauthorized: invalid role",
        "auth.admin_only": "Forbidden: admins only",
        "auth.vendor_only": "Forbidden: vendors only",
        "auth.customer_only": "Forbidden: customers only",
        "auth.invalid_credentials": "Invalid credentials",
        "auth.credentials_required": "Email or phone and password are required",
        "auth.customer_blocked": "Your account has been blocked: {reason}",
        "auth.customer_pending": "Your account is awaiting admin approval",
        "auth.account_not_found": "Account not found",
        "vendor.created": "Vendor created successfully",
        "vendor.updated": "Vendor updated successfully",
        "vendor.deleted": "Vendor and all of its products and files deleted successfully",
        "vendor.not_found": "Vendor not found",
        "vendor.email_taken": "Email is already in use",
        "vendor.phone_taken": "Phone number is already in use",
        "vendor.invalid_email": "Invalid email address",
        "vendor.required_fields": "Please fill in all required fields",
        "customer.created": "Customer created successfully",
        "customer.registered": "Registration received, awaiting admin approval",
        "customer.updated": "Customer updated successfully",
        "customer.deleted": "Customer deleted successfully",
        "customer.blocked": "Customer blocked successfully",
        "customer.unblocked": "Customer unblocked successfully",
        "customer.approved": "Customer approved successfully",
        "customer.rejected": "Customer registration rejected",
        "customer.not_found": "Customer not found",
        "customer.phone_taken": "Phone number already exists",
        "customer.block_reason_required": "A reason is required to block a customer",
        "customer.invalid_phone": "Phone number must be 11 digits",
        "product.not_found": "Product not found",
        "product.required_fields": "Missing required fields: {fields}",
        "product.video_requires_image": "At least one image is required when uploading a video",
        "product.too_many_images": "At most {limit} images may be uploaded",
        "product.too_many_videos": "At most {limit} videos may be uploaded",
        "product.deleted": "Product deleted successfully",
        "media.unsupported_type": "Unsupported file type, only images and videos are allowed",
        "media.too_large": "File is too large, the maximum is {limit} MB",
        "media.invalid_image": "The uploaded logo is not a valid image",
        "order.not_found": "Order not found",
        "order.vendor_mismatch": "The vendor does not match this product",
        "order.created": "Order created successfully",
        "order.status_updated": "Order status updated",
        "order.updated": "Order updated successfully",
        "order.deleted": "Order deleted",
        "order.invalid_status": "Invalid order status",
        "order.invalid_quantity": "Quantity must be greater than 0",
        "order.not_pending": "The order can no longer be edited because it is not pending",
        "order.forbidden_status": "Forbidden: only the order's vendor or an admin can update its status",
        "order.forbidden_edit": "Forbidden: only the customer who placed the order can edit it",
        "order.forbidden_delete": "Forbidden: you cannot delete this order",
        "order.forbidden_view": "Forbidden: you are not a participant of this order",
        "message.empty": "A message needs text or an image",
        "validation.failed": "Request validation failed",
        "internal.error": "Internal server error: {error}",
    },
    "ar": {
        "auth.missing_token": "غير مصرح: يرجى تسجيل الدخول",
        "auth.invalid_token": "غير مصرح: توكن غير صالح",
        "auth.invalid_role": "غير مصرح: دور غير صالح",
        "auth.admin_only": "غير مصرح: للأدمن فقط",
        "auth.vendor_only": "غير مصرح للتجار فقط",
        "auth.customer_only": "غير مصرح للعملاء فقط",
        "auth.invalid_credentials": "بيانات غير صحيحة",
        "auth.credentials_required": "البريد الإلكتروني أو رقم الهاتف وكلمة المرور مطلوبة",
        "auth.customer_blocked": "تم حظر حسابك: {reason}",
        "auth.customer_pending": "حسابك في انتظار موافقة الإدارة",
        "auth.account_not_found": "الحساب غير موجود",
        "vendor.created": "تم إنشاء التاجر بنجاح",
        "vendor.updated": "تم تعديل التاجر بنجاح",
        "vendor.deleted": "تم حذف التاجر وجميع منتجاته وملفاته بنجاح",
        "vendor.not_found": "التاجر غير موجود",
        "vendor.email_taken": "البريد الإلكتروني مستخدم بالفعل",
        "vendor.phone_taken": "رقم الهاتف مستخدم بالفعل",
        "vendor.invalid_email": "البريد الإلكتروني غير صالح",
        "vendor.required_fields": "يرجى ملء جميع الحقول المطلوبة",
        "customer.created": "تم إنشاء العميل بنجاح",
        "customer.registered": "تم استلام التسجيل في انتظار موافقة الإدارة",
        "customer.updated": "تم تعديل العميل بنجاح",
        "customer.deleted": "تم حذف العميل بنجاح",
        "customer.blocked": "تم حظر العميل بنجاح",
        "customer.unblocked": "تم إلغاء حظر العميل بنجاح",
        "customer.approved": "تمت الموافقة على العميل بنجاح",
        "customer.rejected": "تم رفض تسجيل العميل",
        "customer.not_found": "العميل غير موجود",
        "customer.phone_taken": "رقم الهاتف موجود بالفعل",
        "customer.block_reason_required": "يجب إدخال سبب الحظر",
        "customer.invalid_phone": "رقم الهاتف يجب أن يتكون من 11 رقمًا",
        "product.not_found": "المنتج غير موجود",
        "product.required_fields": "حقول مطلوبة مفقودة: {fields}",
        "product.video_requires_image": "يجب رفع صورة واحدة على الأقل عند رفع فيديو",
        "product.too_many_images": "الحد الأقصى للصور هو {limit}",
        "product.too_many_videos": "الحد الأقصى للفيديوهات هو {limit}",
        "product.deleted": "تم الحذف بنجاح",
        "media.unsupported_type": "نوع الملف غير مدعوم! مسموح: صور وفيديوهات فقط",
        "media.too_large": "حجم الملف كبير جداً! الحد الأقصى {limit} ميجابايت",
        "media.invalid_image": "الشعار المرفوع ليس صورة صالحة",
        "order.not_found": "الطلب غير موجود",
        "order.vendor_mismatch": "التاجر غير صحيح لهذا المنتج",
        "order.created": "تم إنشاء الطلب بنجاح",
        "order.status_updated": "تم تحديث حالة الطلب",
        "order.updated": "تم تعديل الطلب بنجاح",
        "order.deleted": "تم حذف الطلب",
        "order.invalid_status": "حالة غير صالحة",
        "order.invalid_quantity": "الكمية يجب أن تكون أكبر من 0",
        "order.not_pending": "لا يمكن تعديل الطلب لأنه ليس في حالة تحت المراجعة",
        "order.forbidden_status": "غير مصرح - فقط التاجر المرتبط أو الأدمن يمكنه تحديث الحالة",
        "order.forbidden_edit": "غير مصرح - فقط العميل المرتبط يمكنه تعديل الطلب",
        "order.forbidden_delete": "غير مصرح - لا يمكنك حذف هذا الطلب",
        "order.forbidden_view": "غير مصرح - لست طرفاً في هذا الطلب",
        "message.empty": "الرسالة تحتاج إلى نص أو صورة",
        "validation.failed": "فشل التحقق من صحة الطلب",
        "internal.error": "خطأ داخلي في السيرفر: {error}",
    },
}

DEFAULT_LOCALE = "en"


def get_message(key: str, **kwargs) -> str:
    """Return the localized message for ``key``, formatted with ``kwargs``."""
    catalog = MESSAGES.get(settings.MESSAGES_LOCALE, MESSAGES[DEFAULT_LOCALE])
    template = catalog.get(key) or MESSAGES[DEFAULT_LOCALE].get(key, key)
    return template.format(**kwargs) if kwargs else template
