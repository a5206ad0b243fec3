# sitebuilder/codegen/templates.py
"""
Fixed project files for the exported Next.js site. Only the project name
parameterizes them.
"""
import json
import re

NEXT_VERSION = "14.2.5"
REACT_VERSION = "18.3.1"


def package_name(project_name: str) -> str:
    """npm-safe package name derived from the project name."""
    name = re.sub(r"[^a-z0-9-]+", "-", project_name.strip().lower())
    name = re.sub(r"-{2,}", "-", name).strip("-")
    return name or "site"


def package_json(project_name: str) -> str:
    manifest = {
        "name": package_name(project_name),
        "version": "0.1.0",
        "private": True,
        "scripts": {
            "dev": "next dev",
            "build": "next build",
            "start": "next start",
            "lint": "next lint",
        },
        "dependencies": {
            "next": NEXT_VERSION,
            "react": REACT_VERSION,
            "react-dom": REACT_VERSION,
        },
        "devDependencies": {
            "@types/node": "20.14.10",
            "@types/react": "18.3.3",
            "@types/react-dom": "18.3.0",
            "autoprefixer": "10.4.19",
            "postcss": "8.4.39",
            "tailwindcss": "3.4.6",
            "typescript": "5.5.3",
        },
    }
    return json.dumps(manifest, indent=2) + "\n"


NEXT_CONFIG = """/** @type {import('next').NextConfig} */
const nextConfig = {
  reactStrictMode: true,
};

module.exports = nextConfig;
"""

TAILWIND_CONFIG = """/** @type {import('tailwindcss').Config} */
module.exports = {
  content: [
    './pages/**/*.{js,ts,jsx,tsx,mdx}',
    './components/**/*.{js,ts,jsx,tsx,mdx}',
  ],
  theme: {
    extend: {},
  },
  plugins: [],
};
"""

POSTCSS_CONFIG = """module.exports = {
  plugins: {
    tailwindcss: {},
    autoprefixer: {},
  },
};
"""

TSCONFIG = json.dumps(
    {
        "compilerOptions": {
            "target": "es5",
            "lib": ["dom", "dom.iterable", "esnext"],
            "allowJs": True,
            "skipLibCheck": True,
            "strict": True,
            "noEmit": True,
            "esModuleInterop": True,
            "module": "esnext",
            "moduleResolution": "bundler",
            "resolveJsonModule": True,
            "isolatedModules": True,
            "jsx": "preserve",
            "incremental": True,
            "paths": {"@/*": ["./*"]},
        },
        "include": ["next-env.d.ts", "**/*.ts", "**/*.tsx"],
        "exclude": ["node_modules"],
    },
    indent=2,
) + "\n"

GITIGNORE = """# Dependencies
node_modules
/.pnp
.pnp.js

# Testing
/coverage

# Next.js
/.next/
/out/

# Production
/build

# Misc
.DS_Store
*.pem

# Debug
npm-debug.log*
yarn-debug.log*
yarn-error.log*

# Local env files
.env*.local

# Vercel
.vercel

# TypeScript
*.tsbuildinfo
next-env.d.ts
"""

GLOBALS_CSS = """@tailwind base;
@tailwind components;
@tailwind utilities;

html,
body {
  padding: 0;
  margin: 0;
}

* {
  box-sizing: border-box;
}

.page-container {
  min-height: 100vh;
}

.builder-body-root {
  min-height: 100vh;
  width: 100%;
}
"""

APP_PAGE = """import '@/styles/globals.css';
import type { AppProps } from 'next/app';

export default function App({ Component, pageProps }: AppProps) {
  return <Component {...pageProps} />;
}
"""

DOCUMENT_PAGE = """import { Html, Head, Main, NextScript } from 'next/document';

export default function Document() {
  return (
    <Html lang="en">
      <Head />
      <body>
        <Main />
        <NextScript />
      </body>
    </Html>
  );
}
"""


def readme(project_name: str) -> str:
    title = project_name.strip() or "Site"
    return f"""# {title}

Generated by the site builder as a standalone Next.js project.

## Getting started

```bash
npm install
npm run dev
```

Open http://localhost:3000 to view the site.

## Layout

- `pages/` one file per builder page (`index.tsx` is the home page)
- `styles/globals.css` global styles
- `config/` the builder, staging and production snapshots this export was built from
"""
