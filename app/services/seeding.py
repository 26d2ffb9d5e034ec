"""Bundled scenario library, ingested into an empty scenario repository on startup."""
from loguru import logger

from app.repositories.base import ScenarioRepository
from app.schemas.scenario import ScenarioDraft
from app.services.difficulty import ingest_scenario

SCENARIO_SEED: list[dict] = [
    {
        "id": "seed-account-suspension",
        "channel": "email",
        "sender_name": "IT Security Team",
        "sender_address": "security@company-support.net",
        "subject": "URGENT: Your account will be suspended in 24 hours",
        "body": "Dear Employee,\n\nWe detected unusual activity on your account. Verify your identity "
                "within 24 hours or your access will be suspended.\n\nhttps://company-login.secure-verify.com/auth",
        "legitimacy": "malicious",
        "attack_family": "phishing",
        "risk_type": "credential_theft",
        "cues": ["urgent language", "threat of suspension", "suspicious domain", "generic greeting"],
        "correct_action": "report",
        "explanation": "Urgency plus a sender domain that is not the company's. IT never threatens suspension by email.",
    },
    {
        "id": "seed-ceo-gift-cards",
        "channel": "email",
        "sender_name": "Dr. Amanda Peterson (CEO)",
        "sender_address": "amanda.peterson@company-mail.org",
        "subject": "Quick favor needed - confidential",
        "body": "I need 10 Amazon gift cards for a client surprise before 5pm. Text photos of the codes "
                "to 555-0199. Keep this between us.",
        "legitimacy": "malicious",
        "attack_family": "bec",
        "risk_type": "payment_fraud",
        "cues": ["unusual request", "urgency", "gift cards", "text codes to personal number",
                 "keep it secret", "reply-to mismatch", "fake CEO"],
        "correct_action": "verify",
        "explanation": "Business email compromise: gift cards, secrecy and a personal reply-to. Call the CEO's office directly.",
    },
    {
        "id": "seed-maintenance-notice",
        "channel": "email",
        "sender_name": "IT Department",
        "sender_address": "it-notifications@yourcompany.com",
        "subject": "Scheduled system maintenance - Saturday 2am-6am",
        "body": "Email, VPN and file shares will be unavailable Saturday 2:00-6:00 AM. No action is required.",
        "legitimacy": "legitimate",
        "risk_type": "none",
        "cues": [],
        "correct_action": "delete",
        "explanation": "Internal sender, no link to follow, no request. Safe to archive.",
    },
    {
        "id": "seed-invoice-bank-change",
        "channel": "email",
        "sender_name": "Accounts Payable",
        "sender_address": "invoices@yourcompany-billing.com",
        "subject": "Invoice #INV-2024-8847 - Payment Required",
        "body": "Our banking details have changed. Please wire $12,450.00 to the new account today.",
        "legitimacy": "malicious",
        "attack_family": "spoofing",
        "risk_type": "payment_fraud",
        "cues": ["look-alike domain", "wire transfer request", "deadline pressure"],
        "premise_factors": ["expected_communication", "correct_branding"],
        "correct_action": "verify",
        "explanation": "Changed bank details on a look-alike domain. Confirm with the vendor using a known number.",
    },
    {
        "id": "seed-toll-fee-sms",
        "channel": "sms",
        "sender_name": "Unknown",
        "body": "FastPass: unpaid toll of $3.75. Pay now to avoid a $50 late fee: bit.ly/tolls-pay",
        "legitimacy": "malicious",
        "attack_family": "smishing",
        "risk_type": "credential_theft",
        "cues": ["unsolicited request", "url shortener", "urgency"],
        "correct_action": "delete",
        "explanation": "Small-fee smishing with a shortened link.",
    },
    {
        "id": "seed-quickbooks-invoice",
        "channel": "email",
        "sender_name": "QuickBooks Payments",
        "sender_address": "noreply@intuit.com",
        "subject": "Invoice from ABC Consulting Services",
        "body": "ABC Consulting Services sent you an invoice for $850.00. View it in QuickBooks.",
        "legitimacy": "suspicious_legitimate",
        "risk_type": "none",
        "cues": ["invoice without context"],
        "correct_action": "verify",
        "explanation": "The platform is real, but confirm the vendor relationship before paying.",
    },
    {
        "id": "seed-tech-support-call",
        "channel": "call",
        "sender_name": "Microsoft Support",
        "body": "We detected viruses on your computer. Please install our remote tool so we can fix it now.",
        "legitimacy": "malicious",
        "attack_family": "vishing",
        "risk_type": "account_takeover",
        "cues": ["unsolicited request", "fake security alert", "fear-based urgency", "callback pressure"],
        "correct_action": "report",
        "explanation": "Microsoft does not make unsolicited support calls.",
    },
    {
        "id": "seed-m365-signin",
        "channel": "email",
        "sender_name": "Microsoft 365",
        "sender_address": "no-reply@microsoft365.net",
        "subject": "Action required: Unusual sign-in activity",
        "body": "We noticed a sign-in from Lagos, Nigeria. Secure your account now.",
        "legitimacy": "malicious",
        "attack_family": "phishing",
        "risk_type": "credential_theft",
        "cues": ["suspicious domain", "foreign location scare", "credential harvesting"],
        "correct_action": "report",
        "explanation": "microsoft365.net is not a Microsoft domain; the scare pushes you to a fake login page.",
    },
    {
        "id": "seed-open-enrollment",
        "channel": "email",
        "sender_name": "HR Benefits Team",
        "sender_address": "benefits@yourcompany.com",
        "subject": "Open Enrollment Reminder - Deadline Friday",
        "body": "Open enrollment closes Friday. Review your elections in the HR portal on the intranet.",
        "legitimacy": "legitimate",
        "risk_type": "none",
        "cues": [],
        "correct_action": "proceed",
        "explanation": "Internal sender pointing to the intranet portal you already use.",
    },
    {
        "id": "seed-cfo-wire",
        "channel": "email",
        "sender_name": "Robert Chen - CFO",
        "sender_address": "r.chen@yourcompany.com",
        "subject": "Confidential - Urgent wire needed",
        "body": "We're closing an acquisition today. Wire $48,000 to the attached account. I'm unavailable by phone.",
        "legitimacy": "malicious",
        "attack_family": "bec",
        "risk_type": "payment_fraud",
        "cues": ["spoofed internal name", "authority pressure", "reply-to mismatch", "keep it secret"],
        "premise_factors": ["internal_process_knowledge"],
        "correct_action": "verify",
        "explanation": "A spoofed executive asking for secrecy and a wire; verify through a known channel.",
    },
    {
        "id": "seed-parking-qr",
        "channel": "email",
        "sender_name": "Parking Services",
        "sender_address": "parking@campus-services.org",
        "subject": "Updated Parking Registration Required",
        "body": "Scan the QR code to re-register your vehicle by Friday or your permit will be revoked.",
        "legitimacy": "malicious",
        "attack_family": "qr_phishing",
        "risk_type": "credential_theft",
        "cues": ["external sender", "qr code", "deadline pressure", "asking for banking details"],
        "correct_action": "report",
        "explanation": "QR codes hide the destination; the external sender asks for payment details.",
    },
    {
        "id": "seed-oauth-consent",
        "channel": "email",
        "sender_name": "Google Workspace",
        "sender_address": "notifications@google-workspace-apps.net",
        "subject": "Action Required: Approve New App Integration",
        "body": "Approve the new 'DocSync Pro' integration to keep access to your shared files.",
        "legitimacy": "malicious",
        "attack_family": "oauth_phishing",
        "risk_type": "credential_theft",
        "cues": ["look-alike domain", "external SharePoint link"],
        "premise_factors": ["correct_branding", "role_appropriate"],
        "correct_action": "report",
        "explanation": "Consent phishing from a look-alike domain asking for broad permissions.",
    },
    {
        "id": "seed-slack-notice",
        "channel": "email",
        "sender_name": "Slack",
        "sender_address": "feedback@slack.com",
        "subject": "Your team admin installed Zoom for Slack",
        "body": "Your workspace admin added the Zoom app. No action is needed.",
        "legitimacy": "legitimate",
        "risk_type": "none",
        "cues": [],
        "correct_action": "delete",
        "explanation": "A routine notification from the real Slack domain.",
    },
    {
        "id": "seed-linkedin-ai",
        "channel": "email",
        "sender_name": "LinkedIn",
        "sender_address": "messages-noreply@linkedin-mail.net",
        "subject": "Sarah Mitchell wants to connect - 12 mutual connections",
        "body": "Loved your talk last week! I'd like to share a role that fits you perfectly. Log in to view.",
        "legitimacy": "malicious",
        "attack_family": "ai_phishing",
        "risk_type": "credential_theft",
        "cues": ["look-alike domain", "MFA phishing"],
        "premise_factors": ["personalization", "recent_event_tie_in"],
        "correct_action": "report",
        "explanation": "A polished, personalized lure on a domain LinkedIn does not use.",
    },
    {
        "id": "seed-microsoft-signin-real",
        "channel": "email",
        "sender_name": "Microsoft",
        "sender_address": "account-security-noreply@microsoft.com",
        "subject": "New sign-in to your Microsoft account",
        "body": "A new sign-in from Chrome on Windows was detected. If this was you, you can ignore this message.",
        "legitimacy": "legitimate",
        "risk_type": "none",
        "cues": [],
        "correct_action": "proceed",
        "explanation": "Genuine Microsoft domain and no request to click anything.",
    },
    {
        "id": "seed-mfa-code-sms",
        "channel": "sms",
        "sender_name": "Microsoft",
        "body": "Your verification code is 482913. Reply with the code to confirm it's you.",
        "legitimacy": "malicious",
        "attack_family": "phishing",
        "risk_type": "credential_theft",
        "cues": ["MFA phishing"],
        "correct_action": "report",
        "explanation": "Nobody legitimate asks you to send back an MFA code.",
    },
    # Chain: wrong number investment scam
    {
        "id": "seed-wrong-number-1",
        "channel": "sms",
        "sender_name": "Unknown",
        "body": "Hi Jessica, are we still on for dinner Thursday?",
        "legitimacy": "malicious",
        "attack_family": "wrong_number",
        "risk_type": "none",
        "cues": ["unsolicited request"],
        "correct_action": "delete",
        "explanation": "A 'wrong number' opener is the first step of many investment scams.",
        "chain_id": "wrong_number_scam_1",
        "chain_order": 1,
        "chain_name": "Wrong Number Investment Scam",
    },
    {
        "id": "seed-wrong-number-2",
        "channel": "sms",
        "sender_name": "Unknown",
        "body": "Sorry for the mix-up! I do crypto trading, made 40% this month. Happy to share tips.",
        "legitimacy": "malicious",
        "attack_family": "wrong_number",
        "risk_type": "payment_fraud",
        "cues": ["financial lure", "too good to be true"],
        "correct_action": "report",
        "explanation": "The stranger pivots to investment talk after you replied.",
        "chain_id": "wrong_number_scam_1",
        "chain_order": 2,
        "chain_name": "Wrong Number Investment Scam",
        "previous_action": "proceed",
    },
    {
        "id": "seed-wrong-number-3",
        "channel": "sms",
        "sender_name": "Amy",
        "body": "My uncle's platform guarantees returns. Deposit $500 today before the window closes.",
        "legitimacy": "malicious",
        "attack_family": "wrong_number",
        "risk_type": "financial_theft",
        "cues": ["too good to be true", "manufactured deadline", "financial lure"],
        "correct_action": "report",
        "explanation": "Guaranteed returns on an unknown platform: classic pig butchering.",
        "chain_id": "wrong_number_scam_1",
        "chain_order": 3,
        "chain_name": "Wrong Number Investment Scam",
        "previous_action": "proceed",
    },
    # Chain: CEO fraud
    {
        "id": "seed-ceo-fraud-1",
        "channel": "email",
        "sender_name": "Mark Thompson (CEO)",
        "sender_address": "mark.thompson@company-exec.net",
        "subject": "Quick question",
        "body": "Are you at your desk? I need you to handle something for me quickly.",
        "legitimacy": "malicious",
        "attack_family": "bec",
        "risk_type": "none",
        "cues": ["look-alike domain", "reply-to mismatch", "fake CEO"],
        "correct_action": "verify",
        "explanation": "A vague request from an executive on a look-alike domain.",
        "chain_id": "ceo_fraud_chain_1",
        "chain_order": 1,
        "chain_name": "CEO Wire Fraud Attempt",
    },
    {
        "id": "seed-ceo-fraud-2",
        "channel": "email",
        "sender_name": "Mark Thompson (CEO)",
        "sender_address": "m.thompson.ceo@gmail.com",
        "subject": "Re: Quick question",
        "body": "Great. Buy five $200 gift cards and text me the numbers. I'll reimburse you personally.",
        "legitimacy": "malicious",
        "attack_family": "bec",
        "risk_type": "payment_fraud",
        "cues": ["gift cards", "text codes to personal number", "manufactured urgency"],
        "correct_action": "report",
        "explanation": "Gift cards and a personal reimbursement promise.",
        "chain_id": "ceo_fraud_chain_1",
        "chain_order": 2,
        "chain_name": "CEO Wire Fraud Attempt",
        "previous_action": "proceed",
    },
    {
        "id": "seed-ceo-fraud-3",
        "channel": "email",
        "sender_name": "Mark Thompson (CEO)",
        "sender_address": "m.thompson.ceo@gmail.com",
        "subject": "Re: Quick question - URGENT",
        "body": "I don't have time for a call. Wire $25,000 to the new account now and keep this confidential.",
        "legitimacy": "malicious",
        "attack_family": "bec",
        "risk_type": "payment_fraud",
        "cues": ["wire transfer request", "keep it secret", "authority pressure"],
        "correct_action": "report",
        "explanation": "Escalation after pushback: refuse and report.",
        "chain_id": "ceo_fraud_chain_1",
        "chain_order": 3,
        "chain_name": "CEO Wire Fraud Attempt",
        "previous_action": "verify",
    },
    # Chain: tech support scam
    {
        "id": "seed-tech-support-1",
        "channel": "call",
        "sender_name": "Microsoft Security Alert",
        "subject": "Voicemail: Computer security warning",
        "body": "Case 88-2231: your computer is leaking data. Call 1-888-555-0142 immediately.",
        "legitimacy": "malicious",
        "attack_family": "vishing",
        "risk_type": "credential_theft",
        "cues": ["fake security alert", "fear-based urgency", "callback pressure"],
        "correct_action": "report",
        "explanation": "Fake case number and a callback number to a scam centre.",
        "chain_id": "tech_support_scam_1",
        "chain_order": 1,
        "chain_name": "Tech Support Scam",
    },
    {
        "id": "seed-tech-support-2",
        "channel": "call",
        "sender_name": "Microsoft Support (James)",
        "subject": "Tech support call transcript",
        "body": "Please go to support-msft-help.com and enter the code so I can connect to your PC.",
        "legitimacy": "malicious",
        "attack_family": "vishing",
        "risk_type": "account_takeover",
        "cues": ["suspicious link domain", "password request", "automated bot pretense"],
        "correct_action": "report",
        "explanation": "Remote access through a fake support domain.",
        "chain_id": "tech_support_scam_1",
        "chain_order": 2,
        "chain_name": "Tech Support Scam",
        "previous_action": "proceed",
    },
]


def seed_scenarios(scenarios: ScenarioRepository, seed: list[dict] | None = None) -> int:
    """Ingest the bundled library when the repository is empty. Returns the number added."""
    if scenarios.count() > 0:
        return 0
    seed = SCENARIO_SEED if seed is None else seed
    for data in seed:
        scenarios.add(ingest_scenario(ScenarioDraft(**data)))
    logger.info("Seeded {} scenarios", len(seed))
    return len(seed)
