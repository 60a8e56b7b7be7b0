"""Indonesian strings for the gate scanner bot."""

ID_STRINGS = {
    # === START / LOGIN ===
    "welcome": (
        "<b>Scanner Tiket Gerbang</b>\n\n"
        "1. Login dengan akun scanner\n"
        "2. Pilih metode scan: Manual input atau Kamera\n"
        "3. Masukkan ID tiket atau scan barcode, sistem akan memvalidasi tiket secara otomatis"
    ),
    "welcome_back": "Login sebagai <b>{name}</b>. Kirim ID tiket untuk scan.",
    "login_username": "Username scanner:",
    "login_password": "Password:",
    "login_success": "Selamat datang, <b>{name}</b>! Kirim ID tiket atau pilih metode scan.",
    "login_inactive": "Akun scanner ini nonaktif. Hubungi administrator.",
    "logout_done": "Logout berhasil",
    "not_logged_in": "Silakan /login terlebih dahulu.",

    # === SCANNING ===
    "scan_prompt": "Masukkan ID tiket...",
    "scanning": "Scanning...",
    "method_header": "<b>Metode Scanning</b>: {mode}",
    "mode_manual": "Manual",
    "mode_camera": "Kamera",
    "camera_start": "Mulai Scan",
    "camera_stop": "Stop Scanning",
    "camera_started": "Arahkan kamera ke barcode tiket",
    "camera_stopped": "Kamera dihentikan.",
    "camera_off_after_scan": "Kamera dijeda setelah scan. Tekan Mulai Scan untuk tiket berikutnya.",

    # === RESULT ===
    "label_name": "Nama",
    "label_ticket_type": "Tipe Tiket",
    "label_match": "Pertandingan",
    "label_quantity": "Jumlah",
    "label_scanned_at": "Waktu Scan",

    # === HISTORY & STATS ===
    "history_title": "<b>Riwayat Scan Tiket</b>",
    "history_empty": "Belum ada riwayat scan",
    "stats_title": "<b>Statistik</b>",
    "stats_total": "Total Scan",
    "stats_successful": "Scan Berhasil",
    "stats_today": "Scan Hari Ini",
    "stats_unique": "Customer Unik",

    # === PHOTO & QR ===
    "photo_no_barcode": "Barcode tidak ditemukan di foto ini. Coba lagi lebih dekat dan lebih terang.",
    "photo_disabled": "Scan foto tidak aktif di stasiun ini.",
    "qr_usage": "Cara pakai: /ticket_qr ID_PESANAN_TIKET",
    "qr_caption": "Tiket {ticket_id}",
    "admin_only": "Perintah ini khusus administrator.",

    # === ERRORS ===
    "error_generic": "Terjadi kesalahan saat scanning",
    "error_empty_identifier": "ID Tiket harus diisi",
    "error_scan_in_progress": "Tiket sebelumnya masih divalidasi, mohon tunggu.",
    "error_remote": "Kesalahan: {detail}",
    "error_login_failed": "Username atau password salah.",
    "error_history": "Gagal mengambil riwayat scan",
    "camera_unsupported": "Kamera tidak didukung pada perangkat ini.",
    "camera_not_found": "Kamera tidak ditemukan pada perangkat ini.",
    "camera_permission_denied": "Akses kamera ditolak. Periksa izin perangkat kamera.",
    "camera_busy": "Kamera sedang dipakai.",
    "camera_unknown": "Tidak dapat mengakses kamera",
    "rate_limited": "Terlalu banyak permintaan. Mohon tunggu sebentar.",
}
